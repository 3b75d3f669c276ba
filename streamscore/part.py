"""A single part of a Csound score, generated from streams.

A part produces i-statements for one instrument by repeatedly asking its
streams for values until ``end_at`` is reached:

1. a duration is chosen by calling the ``durations`` stream;
2. an ``IStatement`` is built with the instrument number, onset and duration;
3. each per-field stream in ``p_streams`` is called to fill in p4 and up;
4. the ``delays`` stream chooses the gap before the next statement.

Every stream call receives the part's ``GenerationContext`` as its only
argument.

Example::

	notes = itertools.count(1)

	part = Part(
		instrument_number = 1,
		start_at = 0.5,
		end_at = 10,
		durations = lambda context: next(notes),
		delays = lambda context: 0.5,
		p_streams = {
			4: lambda context: context.now + 1,
			5: lambda context: 1 / context.last_statement.duration,
		}
	)

	print(part.render())

The loop advances by ``duration + delay`` each step, so streams that never
move time forward will never finish. That is up to the caller.
"""

import logging
import typing

import streamscore.context
import streamscore.errors
import streamscore.statement
import streamscore.table


logger = logging.getLogger(__name__)


StreamType = typing.Callable[[streamscore.context.GenerationContext], typing.Any]

FIRST_FREE_PFIELD = 4


def _pfield_index (key: typing.Any) -> typing.Optional[int]:

	"""
	Return ``key`` as an integer p-field number, or ``None`` if it is not one.
	"""

	if isinstance(key, bool):
		return None

	if isinstance(key, int):
		return key

	if isinstance(key, str) and key.isdecimal():
		return int(key)

	return None


class Part:

	"""
	Generates and renders the i-statements for one instrument.

	Attributes:
		instrument_number: The i-number in the Csound score.
		start_at: Time (seconds) at which generation starts.
		end_at: Time at which generation stops. Generation ends once a step
			takes the current time to or past this value, so the last
			statement may ring on beyond it.
		durations: Stream returning note durations in seconds.
		delays: Stream returning the gap after each note in seconds.
		p_streams: Streams for p4 and up, keyed by p-field number.
		i_statements: Statements built by the most recent generation run.
		rendered: Text produced by the most recent ``render()``.
		generation_context: Context handed to every stream call.
	"""

	def __init__ (
		self,
		instrument_number: typing.Optional[int] = None,
		start_at: typing.Optional[float] = 0,
		end_at: typing.Optional[float] = None,
		durations: typing.Optional[StreamType] = None,
		delays: typing.Optional[StreamType] = None,
		p_streams: typing.Optional[typing.Mapping[typing.Any, StreamType]] = None
	) -> None:

		"""
		Create a part. Only ``end_at``, ``durations``, ``delays`` and
		``instrument_number`` are needed before rendering, and they may be set
		after construction.
		"""

		self.instrument_number = instrument_number
		self.start_at = start_at if start_at is not None else 0
		self.end_at = end_at
		self.durations = durations
		self.delays = delays

		self.p_streams: typing.Dict[int, StreamType] = {}
		self.i_statements: typing.List[streamscore.statement.IStatement] = []
		self.rendered: typing.Optional[str] = None
		self.generation_context = streamscore.context.GenerationContext()

		if p_streams:
			for key, stream in p_streams.items():
				self.p_stream(key, stream)


	def p_stream (self, key: typing.Any, *stream: StreamType) -> typing.Optional[StreamType]:

		"""
		Get the stream for p-field ``key``, or register one when a stream is also given.

		Only p4 and up can be registered here; p1-p3 belong to the part itself
		(use ``durations`` for p3). Registering under a non-integer key or a
		number below 4 logs a warning and is otherwise ignored.
		"""

		index = _pfield_index(key)

		if not stream:
			return self.p_streams.get(index) if index is not None else None

		if index is None:
			logger.warning(f"Attempt to store a p-stream for a non-integer p-field value: {key!r} - ignoring.")
			return None

		if index < FIRST_FREE_PFIELD:
			logger.warning(f"Attempt to store a p-stream for a p-field value less than {FIRST_FREE_PFIELD}: {key!r} - ignoring.")
			return None

		self.p_streams[index] = stream[0]

		return None


	def _check_configuration (self) -> None:

		"""
		Raise ``ConfigurationError`` if the part cannot be generated.
		"""

		if self.end_at is None:
			raise streamscore.errors.ConfigurationError("Can't generate a part with no end_at defined")

		if self.end_at < self.start_at:
			raise streamscore.errors.ConfigurationError(
				f"Can't generate a part with end_at ({self.end_at}) less than start_at ({self.start_at})"
			)

		if self.durations is None:
			raise streamscore.errors.ConfigurationError("Can't generate a part with no durations stream")

		if self.delays is None:
			raise streamscore.errors.ConfigurationError("Can't generate a part with no delays stream")

		if self.instrument_number is None:
			raise streamscore.errors.ConfigurationError("Can't generate a part with no instrument_number")


	def _reset_streams (self) -> None:

		"""
		Call ``reset()`` on every stream that has one, so each run starts fresh.
		"""

		streams: typing.List[typing.Any] = [self.durations, self.delays]
		streams.extend(self.p_streams.values())

		for stream in streams:
			reset = getattr(stream, "reset", None)
			if callable(reset):
				reset()


	def generate (self) -> typing.List[streamscore.statement.IStatement]:

		"""
		Build a fresh list of i-statements from the part's streams.

		Per-field streams run in ascending p-field order, but each one must
		only depend on the context (including p1-p3 of the statement being
		built), never on another p4+ field of the same statement.
		"""

		self._check_configuration()
		self._reset_streams()

		assert self.end_at is not None
		assert self.durations is not None
		assert self.delays is not None

		context = self.generation_context
		context.reset(now=self.start_at, part=self)

		statements: typing.List[streamscore.statement.IStatement] = []
		now = self.start_at

		while now < self.end_at:

			context.now = now

			# The context still points at the previous statement here.
			duration = self.durations(context)

			statement = streamscore.statement.IStatement(
				instrument_number = self.instrument_number,
				onset = now,
				duration = duration
			)

			context.last_statement = statement

			for index in sorted(self.p_streams):
				statement.p(index, self.p_streams[index](context))

			statements.append(statement)

			delay = self.delays(context)
			context.last_delay = delay

			now = now + duration + delay

		self.i_statements = statements

		logger.debug(f"Generated {len(statements)} i-statements for instrument {self.instrument_number}")

		return statements


	def render (self) -> str:

		"""
		Generate the part, then render its statements as an aligned table.
		"""

		self.generate()
		self.rendered = streamscore.table.render_statements(self.i_statements)

		return self.rendered
