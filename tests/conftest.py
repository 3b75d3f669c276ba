import typing

import pytest

import streamscore.context
import streamscore.part
import streamscore.streams


SCENARIO_TABLE = (
	";p1        p2         p3        p4         p5\n"
	"i1         0.5        1         1.5        1\n"
	"i1         2          2         3          0.5\n"
	"i1         4.5        3         5.5        0.333333333333333\n"
	"i1         8          4         9          0.25\n"
)


SCENARIO_YAML = """\
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
"""


def make_scenario_part () -> streamscore.part.Part:

	"""Build the instrument 1 part used by several tests: durations 1, 2, 3, 4 and a fixed 0.5 delay."""

	return streamscore.part.Part(
		instrument_number = 1,
		start_at = 0.5,
		end_at = 10,
		durations = streamscore.streams.Counter(),
		delays = lambda context: 0.5,
		p_streams = {
			4: lambda context: context.now + 1,
			5: lambda context: 1 / context.last_statement.duration,
		}
	)


@pytest.fixture
def scenario_part () -> streamscore.part.Part:

	"""A fresh scenario part for each test."""

	return make_scenario_part()


@pytest.fixture
def recording_stream () -> typing.Callable[..., typing.Any]:

	"""Return a factory for streams that record a snapshot of the context on each call."""

	def factory (value: typing.Any, log: typing.List[typing.Dict[str, typing.Any]]) -> typing.Callable[[streamscore.context.GenerationContext], typing.Any]:

		def stream (context: streamscore.context.GenerationContext) -> typing.Any:

			log.append({
				"now": context.now,
				"part": context.part,
				"last_statement": context.last_statement,
				"last_delay": context.last_delay,
			})

			return value

		return stream

	return factory


@pytest.fixture
def scenario_table () -> str:

	"""The table the scenario part renders to."""

	return SCENARIO_TABLE


@pytest.fixture
def scenario_yaml () -> str:

	"""A score file holding the scenario part between a header and footer."""

	return SCENARIO_YAML
