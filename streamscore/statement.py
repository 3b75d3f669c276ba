"""A single Csound i-statement.

Fields ("p-fields") are numbered from 1, following Csound convention:

	p1  instrument number
	p2  onset time (seconds)
	p3  duration (seconds)
	p4+ instrument-specific parameters

Example::

	statement = IStatement(instrument_number=1, onset=0.5, duration=4.32)
	statement.p(4, "foo")
	statement.render()   # 'i1 0.5 4.32 foo'
"""

import typing


def format_value (value: typing.Any) -> str:

	"""
	Return the score text for a single p-field value.

	Floats print with up to 15 significant digits and no trailing ``.0``,
	so ``2.0`` becomes ``"2"`` and ``1 / 3`` becomes ``"0.333333333333333"``.
	Unset fields (``None``) print as an empty string.
	"""

	if value is None:
		return ""

	if isinstance(value, bool):
		return str(int(value))

	if isinstance(value, float):
		return "%.15g" % value

	return str(value)


class IStatement:

	"""
	An ordered list of p-field values for one score event.
	"""

	def __init__ (
		self,
		instrument_number: typing.Any = None,
		onset: typing.Any = None,
		duration: typing.Any = None
	) -> None:

		"""
		Create a statement, optionally filling in the first three p-fields.
		"""

		self.pfields: typing.List[typing.Any] = []

		if instrument_number is not None:
			self.instrument_number = instrument_number

		if onset is not None:
			self.onset = onset

		if duration is not None:
			self.duration = duration


	def set_field (self, index: int, value: typing.Any) -> None:

		"""
		Store ``value`` at the 1-based p-field ``index``.

		Any fields between the current end and ``index`` are left unset.
		"""

		if index < 1:
			raise IndexError(f"p-field index must be 1 or greater, got {index}")

		if index > len(self.pfields):
			self.pfields.extend([None] * (index - len(self.pfields)))

		self.pfields[index - 1] = value


	def get_field (self, index: int) -> typing.Any:

		"""
		Return the value at the 1-based p-field ``index``, or ``None`` if unset.
		"""

		if index < 1:
			raise IndexError(f"p-field index must be 1 or greater, got {index}")

		if index > len(self.pfields):
			return None

		return self.pfields[index - 1]


	def p (self, index: int, *value: typing.Any) -> typing.Any:

		"""
		Get p-field ``index``, or set it when a value is also given.

		``statement.p(4)`` reads p4; ``statement.p(4, 0.7)`` writes it.
		"""

		if len(value) > 1:
			raise TypeError(f"p() takes at most one value, got {len(value)}")

		if value:
			self.set_field(index, value[0])
			return None

		return self.get_field(index)


	@property
	def instrument_number (self) -> typing.Any:
		return self.get_field(1)

	@instrument_number.setter
	def instrument_number (self, value: typing.Any) -> None:
		self.set_field(1, value)

	@property
	def onset (self) -> typing.Any:
		return self.get_field(2)

	@onset.setter
	def onset (self, value: typing.Any) -> None:
		self.set_field(2, value)

	@property
	def duration (self) -> typing.Any:
		return self.get_field(3)

	@duration.setter
	def duration (self, value: typing.Any) -> None:
		self.set_field(3, value)


	def __len__ (self) -> int:
		return len(self.pfields)


	def render (self) -> str:

		"""
		Return the statement as a single line of score text, e.g. ``i1 0.5 4.32 foo``.
		"""

		return "i" + " ".join(format_value(value) for value in self.pfields)


	def fields_for_rendering (self) -> typing.List[str]:

		"""
		Return the formatted p-fields, with ``i`` prepended to the first one only.
		"""

		fields = [format_value(value) for value in self.pfields]

		if fields:
			fields[0] = "i" + fields[0]

		return fields


	def __repr__ (self) -> str:
		return f"IStatement({self.render()!r})"
