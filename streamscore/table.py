"""Column-aligned text tables of i-statements.

The header row names each p-field, with the first name commented out so the
table is still a valid Csound score::

	;p1        p2         p3        p4
	i1         0         1         0.5
"""

import typing

if typing.TYPE_CHECKING:
	from streamscore.statement import IStatement


COLUMN_SEPARATOR = " " * 8


def header_row (field_count: int) -> typing.List[str]:

	"""
	Return ``[";p1", "p2", ..., "pN"]``.
	"""

	return [(";" if i == 1 else "") + f"p{i}" for i in range(1, field_count + 1)]


def format_table (rows: typing.Sequence[typing.Sequence[str]], separator: str = COLUMN_SEPARATOR) -> str:

	"""
	Left-justify each column to its widest cell and join the rows into text.

	Trailing whitespace is stripped from every line, and the result ends with
	a single newline. An empty ``rows`` gives an empty string.
	"""

	if not rows:
		return ""

	column_count = max(len(row) for row in rows)
	widths = [0] * column_count

	for row in rows:
		for i, cell in enumerate(row):
			widths[i] = max(widths[i], len(cell))

	lines: typing.List[str] = []

	for row in rows:
		cells = [cell.ljust(widths[i]) for i, cell in enumerate(row)]
		lines.append(separator.join(cells).rstrip())

	return "\n".join(lines) + "\n"


def render_statements (statements: typing.Sequence["IStatement"]) -> str:

	"""
	Render statements as an aligned table with a ``;p1 p2 ...`` header row.

	All statements are assumed to have as many p-fields as the first one.
	"""

	if not statements:
		return ""

	rows = [header_row(len(statements[0]))]
	rows.extend(statement.fields_for_rendering() for statement in statements)

	return format_table(rows)
