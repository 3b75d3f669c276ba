"""Streams: the callables that feed values to a part as it is generated.

A stream is any callable taking the ``GenerationContext`` and returning the
next value. Plain functions and lambdas work; the classes here add a
``reset()`` hook so the part can rewind them before every generation run,
which keeps repeated renders identical.

Score files name streams through the registry:

    durations: counter                          # no arguments
    delays:
        constant: 0.5                           # a single argument
    p_streams:
        4:
            now: {offset: 1}                    # keyword arguments
        5:
            cycle: [[0.2, 0.4, 0.8]]            # positional arguments

``register_stream()`` adds your own names. A name containing a dot or colon
(``mypiece.streams.Swell`` or ``mypiece.streams:Swell``) is imported directly.
"""

import importlib
import logging
import math
import random
import typing

import streamscore.context
import streamscore.errors


logger = logging.getLogger(__name__)


ConstructorType = typing.Callable[..., typing.Callable[[streamscore.context.GenerationContext], typing.Any]]


def _check_weights (values: typing.Sequence[typing.Any], weights: typing.Sequence[float]) -> None:

	"""
	Raise ``ValueError`` unless there is one positive weight per value.
	"""

	if len(weights) != len(values):
		raise ValueError(f"Got {len(weights)} weights for {len(values)} values")

	if any(weight <= 0 for weight in weights):
		raise ValueError("Weights must be positive")


class Stream:

	"""
	Base class for streams that keep state between calls.
	"""

	def __call__ (self, context: streamscore.context.GenerationContext) -> typing.Any:
		raise NotImplementedError

	def reset (self) -> None:

		"""
		Rewind to the state the stream was created in.
		"""

		return None


class Constant (Stream):

	"""
	Always returns the same value.
	"""

	def __init__ (self, value: typing.Any) -> None:
		self.value = value

	def __call__ (self, context: streamscore.context.GenerationContext) -> typing.Any:
		return self.value


class Counter (Stream):

	"""
	Counts up from ``start`` by ``step``: 1, 2, 3, ... by default.
	"""

	def __init__ (self, start: float = 1, step: float = 1) -> None:

		self.start = start
		self.step = step
		self._next = start


	def __call__ (self, context: streamscore.context.GenerationContext) -> float:

		value = self._next
		self._next = value + self.step

		return value


	def reset (self) -> None:
		self._next = self.start


class Cycle (Stream):

	"""
	Steps through ``values`` in order, wrapping around at the end.
	"""

	def __init__ (self, values: typing.Sequence[typing.Any]) -> None:

		if not values:
			raise ValueError("Cycle values cannot be empty")

		self.values = list(values)
		self._index = 0


	def __call__ (self, context: streamscore.context.GenerationContext) -> typing.Any:

		value = self.values[self._index % len(self.values)]
		self._index += 1

		return value


	def reset (self) -> None:
		self._index = 0


class _SeededStream (Stream):

	"""
	A stream with its own random number generator.

	With a ``seed`` the values repeat exactly on every run; without one each
	run draws new values.
	"""

	def __init__ (self, seed: typing.Optional[int] = None) -> None:

		self.seed = seed
		self.rng = random.Random(seed)


	def reset (self) -> None:

		if self.seed is not None:
			self.rng.seed(self.seed)


class Choice (_SeededStream):

	"""
	Picks from ``values`` at random, optionally weighted.
	"""

	def __init__ (
		self,
		values: typing.Sequence[typing.Any],
		weights: typing.Optional[typing.Sequence[float]] = None,
		seed: typing.Optional[int] = None
	) -> None:

		super().__init__(seed)

		if not values:
			raise ValueError("Choice values cannot be empty")

		if weights is None:
			weights = [1] * len(values)

		_check_weights(values, weights)

		self.values = list(values)
		self.weights = list(weights)


	def __call__ (self, context: streamscore.context.GenerationContext) -> typing.Any:
		return self.rng.choices(self.values, weights=self.weights)[0]


class Uniform (_SeededStream):

	"""
	A random float between ``low`` and ``high``.
	"""

	def __init__ (self, low: float, high: float, seed: typing.Optional[int] = None) -> None:

		super().__init__(seed)

		if high < low:
			raise ValueError(f"high ({high}) cannot be less than low ({low})")

		self.low = low
		self.high = high


	def __call__ (self, context: streamscore.context.GenerationContext) -> float:
		return self.rng.uniform(self.low, self.high)


class RandomWalk (_SeededStream):

	"""
	Starts at ``start`` and moves up or down by ``step`` on each later call,
	staying within ``low`` and ``high`` when they are given.
	"""

	def __init__ (
		self,
		start: float,
		step: float,
		low: typing.Optional[float] = None,
		high: typing.Optional[float] = None,
		seed: typing.Optional[int] = None
	) -> None:

		super().__init__(seed)

		if step <= 0:
			raise ValueError("Step must be positive")

		if low is not None and high is not None and high < low:
			raise ValueError(f"high ({high}) cannot be less than low ({low})")

		self.start = start
		self.step = step
		self.low = low
		self.high = high
		self._value: typing.Optional[float] = None


	def __call__ (self, context: streamscore.context.GenerationContext) -> float:

		if self._value is None:
			self._value = self.start
			return self._value

		value = self._value + self.rng.choice((-self.step, self.step))

		# Bounce off the limits rather than sticking to them.
		if self.high is not None and value > self.high:
			value = self._value - self.step

		if self.low is not None and value < self.low:
			value = self._value + self.step

		if self.high is not None:
			value = min(value, self.high)

		if self.low is not None:
			value = max(value, self.low)

		self._value = value

		return value


	def reset (self) -> None:

		super().reset()
		self._value = None


class Markov (_SeededStream):

	"""
	A weighted Markov chain over values.

	``transitions`` maps each value to its successors and their weights,
	either as a mapping or as a list of ``(value, weight)`` pairs::

		markov:
		    transitions:
		        0.25: {0.25: 3, 0.5: 1}
		        0.5: {0.25: 1, 1: 1}
		        1: {0.25: 1}
		    initial: 0.25

	The first call returns ``initial`` (or the first value listed). A value
	with no successors repeats.
	"""

	def __init__ (
		self,
		transitions: typing.Mapping[typing.Any, typing.Any],
		initial: typing.Any = None,
		seed: typing.Optional[int] = None
	) -> None:

		super().__init__(seed)

		if not transitions:
			raise ValueError("Transitions cannot be empty")

		# state -> (successors, weights)
		self.transitions: typing.Dict[typing.Any, typing.Tuple[typing.List[typing.Any], typing.List[float]]] = {}

		for state, targets in transitions.items():

			pairs = list(targets.items()) if isinstance(targets, typing.Mapping) else [tuple(pair) for pair in targets]
			successors = [pair[0] for pair in pairs]
			weights = [pair[1] for pair in pairs]

			_check_weights(successors, weights)
			self.transitions[state] = (successors, weights)

		if initial is None:
			initial = next(iter(self.transitions))

		if initial not in self.transitions:
			raise ValueError(f"Initial state {initial!r} must exist in transitions")

		self.initial = initial
		self._state: typing.Any = None


	def __call__ (self, context: streamscore.context.GenerationContext) -> typing.Any:

		if self._state is None:
			self._state = self.initial
			return self._state

		successors, weights = self.transitions.get(self._state, ([], []))

		if successors:
			self._state = self.rng.choices(successors, weights=weights)[0]

		return self._state


	def reset (self) -> None:

		super().reset()
		self._state = None


class Line (Stream):

	"""
	A ramp from ``start_val`` to ``end_val`` over ``duration`` seconds of score time.

	Before ``start_at`` the ramp holds ``start_val``; after it finishes it
	holds ``end_val``, unless ``loop`` is set, in which case it starts over.

	``curve`` bends the ramp the way Csound's ``transeg`` does: 0 is a
	straight line, positive values start slowly and finish fast, negative
	values start fast and level off.
	"""

	def __init__ (
		self,
		start_val: float,
		end_val: float,
		duration: float,
		start_at: float = 0.0,
		loop: bool = False,
		curve: float = 0.0
	) -> None:

		if duration <= 0:
			raise ValueError("Ramp duration must be positive")

		self.start_val = start_val
		self.end_val = end_val
		self.duration = duration
		self.start_at = start_at
		self.loop = loop
		self.curve = curve


	def value_at (self, now: float) -> float:

		"""
		Return the ramp value at time ``now``.
		"""

		elapsed = now - self.start_at

		if elapsed < 0:
			return self.start_val

		if self.loop:
			elapsed %= self.duration
		elif elapsed >= self.duration:
			return self.end_val

		progress = elapsed / self.duration

		if self.curve != 0:
			progress = (1 - math.exp(progress * self.curve)) / (1 - math.exp(self.curve))

		return self.start_val + (progress * (self.end_val - self.start_val))


	def __call__ (self, context: streamscore.context.GenerationContext) -> float:
		return self.value_at(context.now)


class LFO (Stream):

	"""
	A periodic function of score time, between ``min_val`` and ``max_val``.

	Parameters:
		shape: "sine", "triangle", "saw" or "square".
		cycle: Length of one period in seconds.
		min_val: Bottom of the range.
		max_val: Top of the range.
		phase: Offset into the period, 0.0 to 1.0.
	"""

	SHAPES = ("sine", "triangle", "saw", "square")

	def __init__ (self, shape: str = "sine", cycle: float = 16.0, min_val: float = 0.0, max_val: float = 1.0, phase: float = 0.0) -> None:

		if shape not in self.SHAPES:
			raise ValueError(f"Unknown LFO shape {shape!r}. Available shapes: {', '.join(self.SHAPES)}")

		if cycle <= 0:
			raise ValueError("LFO cycle must be positive")

		self.shape = shape
		self.cycle = cycle
		self.min_val = min_val
		self.max_val = max_val
		self.phase = phase


	def value_at (self, now: float) -> float:

		"""
		Return the LFO value at time ``now``.
		"""

		progress = (now / self.cycle + self.phase) % 1.0

		if self.shape == "sine":
			# -1..1 to 0..1
			val = (math.sin(progress * 2 * math.pi) + 1) / 2

		elif self.shape == "triangle":
			val = progress * 2 if progress < 0.5 else 2 - (progress * 2)

		elif self.shape == "saw":
			val = progress

		else:
			val = 1.0 if progress < 0.5 else 0.0

		return self.min_val + (val * (self.max_val - self.min_val))


	def __call__ (self, context: streamscore.context.GenerationContext) -> float:
		return self.value_at(context.now)


class Now (Stream):

	"""
	The current time plus ``offset``.
	"""

	def __init__ (self, offset: float = 0) -> None:
		self.offset = offset

	def __call__ (self, context: streamscore.context.GenerationContext) -> float:
		return context.now + self.offset


class ReciprocalDuration (Stream):

	"""
	``1 / duration`` of the statement being built, so shorter notes get larger values.
	"""

	def __call__ (self, context: streamscore.context.GenerationContext) -> float:

		if context.last_statement is None:
			raise ValueError("reciprocal_duration needs a statement in the context; use it for p4 and up")

		return 1 / context.last_statement.duration


STREAMS: typing.Dict[str, ConstructorType] = {
	"constant":            Constant,
	"counter":             Counter,
	"cycle":               Cycle,
	"choice":              Choice,
	"uniform":             Uniform,
	"random_walk":         RandomWalk,
	"markov":              Markov,
	"line":                Line,
	"lfo":                 LFO,
	"now":                 Now,
	"reciprocal_duration": ReciprocalDuration,
}


def register_stream (name: str, constructor: ConstructorType) -> None:

	"""
	Make ``constructor`` available to score files under ``name``.

	The constructor receives the stream's configuration and must return a
	callable that takes the generation context.
	"""

	if not callable(constructor):
		raise ValueError(f"Stream constructor for {name!r} must be callable")

	if name in STREAMS:
		logger.debug(f"Replacing registered stream {name!r}")

	STREAMS[name] = constructor


def _import_constructor (name: str) -> ConstructorType:

	"""
	Import ``package.module:attr`` or ``package.module.attr``.
	"""

	if ":" in name:
		module_name, _, attr = name.partition(":")
	else:
		module_name, _, attr = name.rpartition(".")

	try:
		module = importlib.import_module(module_name)
	except ImportError as exc:
		raise streamscore.errors.ConfigurationError(f"Could not import stream {name!r}: {exc}") from exc

	try:
		constructor = getattr(module, attr)
	except AttributeError as exc:
		raise streamscore.errors.ConfigurationError(f"Module {module_name!r} has no stream {attr!r}") from exc

	return typing.cast(ConstructorType, constructor)


def get_stream (name: str) -> ConstructorType:

	"""
	Return the constructor registered (or importable) under ``name``.
	"""

	if name in STREAMS:
		return STREAMS[name]

	if "." in name or ":" in name:
		return _import_constructor(name)

	available = ", ".join(sorted(STREAMS))
	raise streamscore.errors.ConfigurationError(f"Unknown stream {name!r}. Available streams: {available}")


def create_stream (spec: typing.Any) -> typing.Callable[[streamscore.context.GenerationContext], typing.Any]:

	"""
	Build a stream from its score-file form.

	``spec`` is either a stream name, or a single-entry mapping from a stream
	name to its configuration. A mapping configuration is passed as keyword
	arguments, a list as positional arguments, and anything else as the only
	argument.
	"""

	if isinstance(spec, str):
		name, config = spec, None

	elif isinstance(spec, typing.Mapping):

		if len(spec) != 1:
			raise streamscore.errors.ConfigurationError(
				f"Invalid stream config; expected a single key and value, got {spec!r}"
			)

		name, config = next(iter(spec.items()))

		if not isinstance(name, str):
			raise streamscore.errors.ConfigurationError(f"Stream name must be a string, got {name!r}")

	else:
		raise streamscore.errors.ConfigurationError(
			f"Invalid stream config; expected a name or a single-key mapping, got {spec!r}"
		)

	constructor = get_stream(name)

	try:
		if config is None:
			stream = constructor()
		elif isinstance(config, typing.Mapping):
			stream = constructor(**config)
		elif isinstance(config, list):
			stream = constructor(*config)
		else:
			stream = constructor(config)
	except (TypeError, ValueError) as exc:
		raise streamscore.errors.ConfigurationError(f"Could not construct stream {name!r}: {exc}") from exc

	if not callable(stream):
		raise streamscore.errors.ConfigurationError(f"Stream {name!r} did not construct a callable")

	return stream
