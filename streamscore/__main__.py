import argparse
import logging
import sys
import typing

import streamscore.errors
import streamscore.score


logger = logging.getLogger(__name__)


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Load a YAML score, render it, and write the result.
	"""

	parser = argparse.ArgumentParser(prog="streamscore", description="Render a YAML score description to Csound score text.")
	parser.add_argument("score", help="path to the YAML score file")
	parser.add_argument("-o", "--output", help="write the score here instead of stdout")
	parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	try:
		text = streamscore.score.Score.load_file(args.score).render()
	except FileNotFoundError:
		logger.error(f"Score file {args.score} not found")
		return 1
	except OSError as exc:
		logger.error(f"Could not read {args.score}: {exc}")
		return 1
	except streamscore.errors.ConfigurationError as exc:
		logger.error(f"Could not render {args.score}: {exc}")
		return 1

	if args.output:
		with open(args.output, "w") as f:
			f.write(text)
		logger.info(f"Wrote {args.output}")
	else:
		sys.stdout.write(text)

	return 0


if __name__ == "__main__":
	sys.exit(main())
