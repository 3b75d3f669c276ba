"""A Csound score: header text, generated parts, footer text.

Scores are usually loaded from YAML::

    ---
    header: |
        f1 0 512 10 1
    parts:
        - instrument_number: 1
          start_at: 0.5
          end_at: 10
          durations: counter
          delays:
              constant: 0.5
          p_streams:
              4:
                  now: {offset: 1}
              5: reciprocal_duration
    footer: |
        e

    print(Score.load(text).render())

``durations``, ``delays`` and ``p_streams`` are optional in the file, but a
part cannot be rendered until its durations and delays are set. See
``streamscore.streams.create_stream`` for the forms a stream entry can take.
"""

import logging
import typing

import yaml

import streamscore.errors
import streamscore.part
import streamscore.streams


logger = logging.getLogger(__name__)


PART_KEYS = ("instrument_number", "start_at", "end_at", "durations", "delays", "p_streams")


class Score:

	"""
	An ordered list of parts framed by literal header and footer text.
	"""

	def __init__ (
		self,
		parts: typing.Optional[typing.List[streamscore.part.Part]] = None,
		header: str = "",
		footer: str = ""
	) -> None:

		self.parts: typing.List[streamscore.part.Part] = parts if parts is not None else []
		self.header = header
		self.footer = footer
		self.rendered: typing.Optional[str] = None


	@classmethod
	def load (cls, text: str) -> "Score":

		"""
		Build a score from a YAML document.
		"""

		try:
			config = yaml.safe_load(text)
		except yaml.YAMLError as exc:
			raise streamscore.errors.ConfigurationError(f"Could not parse score YAML: {exc}") from exc

		if config is None:
			config = {}

		if not isinstance(config, dict):
			raise streamscore.errors.ConfigurationError(f"Score YAML must be a mapping, got {type(config).__name__}")

		for key in ("header", "footer"):
			if not isinstance(config.get(key) or "", str):
				raise streamscore.errors.ConfigurationError(f"Score {key} must be text, got {config[key]!r}")

		parts = config.get("parts") or []

		if not isinstance(parts, list):
			raise streamscore.errors.ConfigurationError(f"Score parts must be a list, got {parts!r}")

		score = cls(
			header = config.get("header") or "",
			footer = config.get("footer") or ""
		)

		for i, part_config in enumerate(parts):
			score.parts.append(cls._load_part(part_config, i))

		logger.debug(f"Loaded score with {len(score.parts)} parts")

		return score


	@classmethod
	def load_file (cls, path: str) -> "Score":

		"""
		Build a score from a YAML file.
		"""

		with open(path, "r") as f:
			return cls.load(f.read())


	@staticmethod
	def _load_part (part_config: typing.Any, position: int) -> streamscore.part.Part:

		"""
		Build one part from its mapping in the score file.
		"""

		if not isinstance(part_config, dict):
			raise streamscore.errors.ConfigurationError(f"Part {position} must be a mapping, got {part_config!r}")

		unknown = sorted(str(key) for key in part_config if key not in PART_KEYS)

		if unknown:
			raise streamscore.errors.ConfigurationError(f"Part {position} has unknown keys: {', '.join(unknown)}")

		part = streamscore.part.Part(
			instrument_number = part_config.get("instrument_number"),
			start_at = part_config.get("start_at"),
			end_at = part_config.get("end_at")
		)

		if part_config.get("durations") is not None:
			part.durations = streamscore.streams.create_stream(part_config["durations"])

		if part_config.get("delays") is not None:
			part.delays = streamscore.streams.create_stream(part_config["delays"])

		p_streams = part_config.get("p_streams")

		if p_streams is not None:

			if not isinstance(p_streams, dict):
				raise streamscore.errors.ConfigurationError(f"p_streams for part {position} must be a mapping, got {p_streams!r}")

			for pfield, stream_config in p_streams.items():
				part.p_stream(pfield, streamscore.streams.create_stream(stream_config))

		return part


	def render (self) -> str:

		"""
		Render every part in order between the header and footer.

		Nothing is returned (or cached) if any part fails to generate.
		"""

		body = "".join(part.render() for part in self.parts)
		self.rendered = self.header + "\n" + body + "\n" + self.footer

		return self.rendered
