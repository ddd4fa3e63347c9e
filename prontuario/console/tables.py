"""Fixed-width text tables for the console.

    +-----+------------------------------+
    | ID  | Name                         |
    +-----+------------------------------+
    | 1   | Alice                        |
    +-----+------------------------------+
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

# (header, width)
Column = tuple[str, int]


def format_timestamp(value: datetime | None) -> str:
    return value.strftime(TIMESTAMP_FORMAT) if value is not None else ""


def _fit(value: Any, width: int) -> str:
    text = "" if value is None else str(value)
    return text[:width]


def border(columns: Sequence[Column]) -> str:
    return "+" + "+".join("-" * (width + 2) for _, width in columns) + "+"


def row(columns: Sequence[Column], values: Sequence[Any]) -> str:
    cells = [f" {_fit(value, width):<{width}} " for value, (_, width) in zip(values, columns)]
    return "|" + "|".join(cells) + "|"


def render_table(
    columns: Sequence[Column],
    rows: Iterable[Sequence[Any]],
    *,
    empty_message: str | None = None,
) -> str:
    line = border(columns)
    lines = [line, row(columns, [header for header, _ in columns]), line]

    body = [row(columns, values) for values in rows]
    if not body and empty_message:
        inner_width = len(line) - 2
        body.append("|" + _fit(empty_message, inner_width).center(inner_width) + "|")

    lines.extend(body)
    lines.append(line)
    return "\n".join(lines)
