"""Compact and legacy board formats.

Compact format (canonical)::

    T1=0,0,1;T2=1;T3=

Tubes are separated by ``;`` and labelled ``T<index+1>`` in board order.
Balls are listed bottom-to-top as palette indices; an empty tube has
nothing after ``=``.

Legacy format (read-only)::

    {"Tubes": [{"Id": 0, "Balls": [{"Color": "#FF6B6B", "Position": 0}]}]}

Both parse to the same in-memory :class:`Board`, with tube ids
``1..n`` in order.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from ballsort.models.board import Board, Color
from ballsort.models.palette import code_for

# Labels and color codes are short; longer digit runs are rejected before int().
_TUBE_RE = re.compile(r"^T(\d{1,9})=(.*)$")
_CODE_RE = re.compile(r"^\d{1,9}$")


class FormatError(ValueError):
    """Raised when a board string cannot be parsed."""


# -- compact format -----------------------------------------------------------


def serialize(board: Board) -> str:
    return ";".join(
        f"T{i + 1}=" + ",".join(str(b.color) for b in tube.balls)
        for i, tube in enumerate(board.tubes)
    )


def deserialize(text: str, capacity: int | None = None) -> Board:
    """Parse a compact board string.

    When *capacity* is omitted it is inferred from the ball counts (see
    :func:`infer_capacity`).
    """
    if not isinstance(text, str) or not text.strip():
        raise FormatError("Empty board string.")

    tubes: list[list[Color]] = []
    for expected, part in enumerate(text.strip().split(";"), start=1):
        match = _TUBE_RE.match(part.strip())
        if match is None:
            raise FormatError(f"Malformed tube entry {part!r}.")
        label, body = int(match.group(1)), match.group(2).strip()
        if label != expected:
            raise FormatError(
                f"Tube label T{label} out of order (expected T{expected})."
            )
        tubes.append(_parse_balls(body, label))

    return _build(tubes, capacity)


def _parse_balls(body: str, label: int) -> list[Color]:
    if not body:
        return []
    colors: list[Color] = []
    for token in body.split(","):
        token = token.strip()
        if not _CODE_RE.match(token):
            raise FormatError(f"Invalid color code {token!r} in tube T{label}.")
        colors.append(int(token))
    return colors


# -- legacy JSON format -------------------------------------------------------


def deserialize_legacy(
    data: str | Mapping[str, Any], capacity: int | None = None
) -> Board:
    """Parse the legacy JSON shape into the same board the compact form gives.

    A ``Capacity`` stored on legacy tubes is ignored; capacity is inferred
    exactly as for compact strings unless passed explicitly.
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise FormatError(f"Invalid legacy JSON: {exc.msg}.") from exc
        except (ValueError, RecursionError) as exc:
            raise FormatError(f"Invalid legacy JSON: {exc}.") from exc

    if not isinstance(data, Mapping) or not isinstance(data.get("Tubes"), list):
        raise FormatError("Legacy board must be an object with a 'Tubes' list.")

    tubes: list[list[Color]] = []
    for index, raw_tube in enumerate(data["Tubes"]):
        if not isinstance(raw_tube, Mapping):
            raise FormatError(f"Legacy tube #{index} is not an object.")
        raw_balls = raw_tube.get("Balls", [])
        if not isinstance(raw_balls, list):
            raise FormatError(f"Legacy tube #{index} has no 'Balls' list.")
        tubes.append(_legacy_balls(raw_balls, index))

    return _build(tubes, capacity)


def _legacy_balls(raw_balls: list[Any], index: int) -> list[Color]:
    ranked: list[tuple[int, Color]] = []
    for order, raw in enumerate(raw_balls):
        if not isinstance(raw, Mapping) or "Color" not in raw:
            raise FormatError(f"Legacy tube #{index} has a ball without 'Color'.")
        position = raw.get("Position", order)
        if not isinstance(position, int) or isinstance(position, bool):
            raise FormatError(f"Legacy tube #{index} has a non-integer position.")
        ranked.append((position, _legacy_color(raw["Color"], index)))

    ranked.sort(key=lambda pair: pair[0])
    positions = [p for p, _ in ranked]
    if len(set(positions)) != len(positions):
        raise FormatError(f"Legacy tube #{index} has duplicate ball positions.")
    return [color for _, color in ranked]


def _legacy_color(value: Any, index: int) -> Color:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    if isinstance(value, str):
        if _CODE_RE.match(value.strip()):
            return int(value.strip())
        code = code_for(value)
        if code is not None:
            return code
    raise FormatError(f"Unknown color {value!r} in legacy tube #{index}.")


# -- shared -------------------------------------------------------------------


def parse_board(text: str, capacity: int | None = None) -> Board:
    """Parse either format, picking legacy JSON when the text starts with ``{``."""
    if isinstance(text, str) and text.lstrip().startswith("{"):
        return deserialize_legacy(text, capacity)
    return deserialize(text, capacity)


def infer_capacity(tubes: list[list[Color]]) -> int:
    """Capacity implied by ball counts.

    Every color is expected to have the same ball count, which is also the
    tube capacity. The result is never below the longest tube.
    """
    counts: dict[Color, int] = {}
    for colors in tubes:
        for c in colors:
            counts[c] = counts.get(c, 0) + 1
    longest = max((len(colors) for colors in tubes), default=0)
    return max(max(counts.values(), default=0), longest, 1)


def _build(tubes: list[list[Color]], capacity: int | None) -> Board:
    if not tubes:
        raise FormatError("Board has no tubes.")
    if capacity is None:
        capacity = infer_capacity(tubes)
    elif capacity < 1:
        raise FormatError(f"Capacity must be positive, got {capacity}.")
    for i, colors in enumerate(tubes):
        if len(colors) > capacity:
            raise FormatError(
                f"Tube T{i + 1} holds {len(colors)} balls, capacity is {capacity}."
            )
    return Board.from_lists(capacity, tubes)
