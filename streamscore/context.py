import dataclasses
import typing

if typing.TYPE_CHECKING:
	from streamscore.part import Part
	from streamscore.statement import IStatement


@dataclasses.dataclass
class GenerationContext:

	"""
	State passed to every stream invocation while a part is generated.

	Attributes:
		now: The current time in seconds (as of the end of the last delay).
		part: The ``Part`` being generated.
		last_statement: The most recently built ``IStatement``. During duration
			selection this is the *previous* statement, since the next one has
			not been built yet.
		last_delay: The most recently chosen delay, in seconds.
	"""

	now: float = 0.0
	part: typing.Optional["Part"] = None
	last_statement: typing.Optional["IStatement"] = None
	last_delay: typing.Optional[float] = None


	@property
	def statement (self) -> typing.Optional["IStatement"]:

		"""Alias for ``last_statement``."""

		return self.last_statement


	@property
	def delay (self) -> typing.Optional[float]:

		"""Alias for ``last_delay``."""

		return self.last_delay


	def reset (self, now: float = 0.0, part: typing.Optional["Part"] = None) -> None:

		"""
		Clear history left over from a previous generation run.
		"""

		self.now = now
		self.part = part
		self.last_statement = None
		self.last_delay = None
