import typing

NULL = "null"


def _cell(value: typing.Any) -> str:
    return NULL if value is None else str(value)


def tabulate(rows: typing.Iterable[typing.Sequence[typing.Any]], headers: typing.Sequence[str] = ()) -> str:
    """Renders rows as ``| a | b |`` lines, every cell padded to the widest one of its column."""
    display_rows = [list(headers)] if headers else []
    display_rows.extend([_cell(value) for value in row] for row in rows)
    if not display_rows:
        return ""

    widths = [max(map(len, column)) for column in zip(*display_rows)]
    return "\n".join(
        "| " + " | ".join(cell.ljust(width) for cell, width in zip(row, widths)) + " |" for row in display_rows
    )
