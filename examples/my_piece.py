"""Custom streams referenced from a score file by import path.

Run from this directory so the module can be imported:

	python -m streamscore my_piece.yaml
"""

import typing

import streamscore.context
import streamscore.streams


class Durations (streamscore.streams.Stream):

	"""
	Each note one second longer than the last.
	"""

	def __init__ (self) -> None:
		self._notes = 0

	def __call__ (self, context: streamscore.context.GenerationContext) -> int:
		self._notes += 1
		return self._notes

	def reset (self) -> None:
		self._notes = 0


class P4Stream (streamscore.streams.Stream):

	"""
	A function of time: the current time plus ``value_to_add``.
	"""

	def __init__ (self, value_to_add: float = 0) -> None:
		self.value_to_add = value_to_add

	def __call__ (self, context: streamscore.context.GenerationContext) -> float:
		return context.now + self.value_to_add


def p5_stream () -> typing.Callable[[streamscore.context.GenerationContext], float]:

	"""
	A function of duration: louder for shorter notes.
	"""

	return lambda context: 1 / context.last_statement.duration
