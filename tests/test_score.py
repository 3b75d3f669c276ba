"""Tests for Score rendering and YAML loading."""

import pathlib

import pytest

import streamscore
import streamscore.errors
import streamscore.part
import streamscore.score
import streamscore.streams


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def test_render_joins_header_parts_and_footer (scenario_part: streamscore.part.Part, scenario_table: str) -> None:

	"""Header, a blank line, the part tables, a blank line, then the footer."""

	score = streamscore.score.Score(parts=[scenario_part], header="f1 0 512 10 1\n", footer="e\n")

	expected = "f1 0 512 10 1\n" + "\n" + scenario_table + "\n" + "e\n"

	assert score.render() == expected
	assert score.rendered == expected


def test_render_keeps_part_order () -> None:

	"""Parts render in the order they were added."""

	def part (instrument: int) -> streamscore.part.Part:
		return streamscore.part.Part(instrument_number=instrument, end_at=1, durations=lambda c: 1, delays=lambda c: 0)

	score = streamscore.score.Score(parts=[part(2), part(1)])
	text = score.render()

	assert text.index("i2") < text.index("i1")


def test_render_without_parts () -> None:

	"""An empty score is just its header and footer."""

	assert streamscore.score.Score(header="h", footer="f").render() == "h\n\nf"


def test_failed_part_aborts_render (scenario_part: streamscore.part.Part) -> None:

	"""A badly configured part stops the whole render with no cached output."""

	broken = streamscore.part.Part(instrument_number=2, durations=lambda c: 1, delays=lambda c: 1)
	score = streamscore.score.Score(parts=[scenario_part, broken])

	with pytest.raises(streamscore.errors.ConfigurationError, match="no end_at"):
		score.render()

	assert score.rendered is None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def test_load_renders_scenario (scenario_yaml: str, scenario_table: str) -> None:

	"""The YAML version of the scenario renders the same table."""

	score = streamscore.Score.load(scenario_yaml)

	assert score.header == "f1 0 512 10 1\n"
	assert score.footer == "e\n"
	assert score.render() == "f1 0 512 10 1\n\n" + scenario_table + "\ne\n"


def test_load_file (tmp_path: pathlib.Path, scenario_yaml: str, scenario_table: str) -> None:

	"""Scores can be read straight from a file."""

	path = tmp_path / "score.yaml"
	path.write_text(scenario_yaml)

	score = streamscore.score.Score.load_file(str(path))

	assert scenario_table in score.render()


def test_load_defaults () -> None:

	"""Missing header, footer and start_at fall back to defaults; streams are optional."""

	score = streamscore.score.Score.load("parts:\n  - instrument_number: 3\n    end_at: 4\n")
	part = score.parts[0]

	assert score.header == ""
	assert score.footer == ""
	assert part.start_at == 0
	assert part.durations is None
	assert part.p_streams == {}


def test_load_null_start_at () -> None:

	"""An explicit null start_at also falls back to 0 and the part renders."""

	score = streamscore.score.Score.load(
		"parts:\n"
		"  - instrument_number: 1\n"
		"    start_at: ~\n"
		"    end_at: 1\n"
		"    durations: {constant: 1}\n"
		"    delays: {constant: 0}\n"
	)

	assert score.parts[0].start_at == 0
	assert "i1         0         1" in score.render()


def test_load_empty_document () -> None:

	"""An empty document is an empty score."""

	score = streamscore.score.Score.load("")

	assert score.parts == []
	assert score.render() == "\n\n"


def test_load_builds_streams () -> None:

	"""Stream names and single-key mappings become stream objects."""

	score = streamscore.score.Score.load(
		"parts:\n"
		"  - instrument_number: 1\n"
		"    end_at: 2\n"
		"    durations: counter\n"
		"    delays: {constant: 5}\n"
		"    p_streams:\n"
		"      4: {cycle: [[a, b]]}\n"
	)

	part = score.parts[0]

	assert isinstance(part.durations, streamscore.streams.Counter)
	assert isinstance(part.delays, streamscore.streams.Constant)
	assert isinstance(part.p_stream(4), streamscore.streams.Cycle)
	assert part.render() == (
		";p1        p2        p3        p4\n"
		"i1         0         1         a\n"
	)


def test_load_ignores_low_p_stream (caplog: pytest.LogCaptureFixture) -> None:

	"""A p_streams entry below 4 is warned about and skipped."""

	score = streamscore.score.Score.load(
		"parts:\n"
		"  - instrument_number: 1\n"
		"    end_at: 2\n"
		"    p_streams:\n"
		"      3: counter\n"
		"      4: counter\n"
	)

	assert list(score.parts[0].p_streams) == [4]
	assert "less than 4" in caplog.text


@pytest.mark.parametrize("text, message", [
	("parts: [", "Could not parse"),
	("- 1\n- 2\n", "must be a mapping"),
	("parts:\n  - 5\n", "Part 0 must be a mapping"),
	("parts:\n  - instrument: 1\n", "unknown keys: instrument"),
	("parts:\n  - durations: no_such_stream\n", "Unknown stream 'no_such_stream'"),
	("parts:\n  - durations: {constant: 1, counter: 2}\n", "single key"),
	("parts:\n  - durations: [constant]\n", "expected a name"),
	("parts:\n  - delays: {constant: {nonsense: 1}}\n", "Could not construct stream 'constant'"),
	("parts:\n  - p_streams: [1, 2]\n", "p_streams for part 0"),
	("parts: 5\n", "parts must be a list"),
	("parts: {instrument_number: 1}\n", "parts must be a list"),
	("header: [f1, 0]\n", "header must be text"),
	("footer: {e: 1}\n", "footer must be text"),
])
def test_load_rejects_bad_documents (text: str, message: str) -> None:

	"""Malformed documents raise ConfigurationError."""

	with pytest.raises(streamscore.errors.ConfigurationError, match=message):
		streamscore.score.Score.load(text)
