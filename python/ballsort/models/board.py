"""Board model for the ball-sort puzzle."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

Color = int


@dataclass(frozen=True)
class Ball:
    color: Color
    position: int


@dataclass
class Tube:
    """A bounded stack of balls, stored bottom-to-top.

    ``balls[i].position == i`` always holds; every mutation goes through
    :meth:`push` / :meth:`pop` so positions stay contiguous.
    """

    id: int
    capacity: int
    balls: list[Ball] = field(default_factory=list)

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_colors(cls, tube_id: int, capacity: int, colors: list[Color]) -> Tube:
        """Create a tube from a bottom-to-top color list.

        Example::

            Tube.from_colors(1, 4, [0, 0, 1])
        """
        if len(colors) > capacity:
            raise ValueError(
                f"Tube {tube_id} holds {len(colors)} balls but its "
                f"capacity is {capacity}."
            )
        return cls(
            id=tube_id,
            capacity=capacity,
            balls=[Ball(color=c, position=i) for i, c in enumerate(colors)],
        )

    # -- queries --------------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self.balls)

    @property
    def is_empty(self) -> bool:
        return not self.balls

    @property
    def is_full(self) -> bool:
        return len(self.balls) >= self.capacity

    @property
    def is_monochrome(self) -> bool:
        """True if the tube is non-empty and every ball shares one color."""
        if not self.balls:
            return False
        first = self.balls[0].color
        return all(b.color == first for b in self.balls)

    @property
    def is_complete(self) -> bool:
        return len(self.balls) == self.capacity and self.is_monochrome

    def top_ball(self) -> Ball | None:
        return self.balls[-1] if self.balls else None

    def top_color(self) -> Color | None:
        return self.balls[-1].color if self.balls else None

    def colors(self) -> list[Color]:
        return [b.color for b in self.balls]

    def distinct_colors(self) -> int:
        return len({b.color for b in self.balls})

    def can_receive(self, color: Color) -> bool:
        if self.is_full:
            return False
        if self.is_empty:
            return True
        return self.top_color() == color

    # -- mutation -------------------------------------------------------------

    def push(self, color: Color) -> Ball:
        if self.is_full:
            raise ValueError(f"Tube {self.id} is full.")
        ball = Ball(color=color, position=len(self.balls))
        self.balls.append(ball)
        return ball

    def pop(self) -> Ball:
        if not self.balls:
            raise ValueError(f"Tube {self.id} is empty.")
        return self.balls.pop()

    def copy(self) -> Tube:
        # Balls are frozen, so sharing them between copies is safe.
        return Tube(id=self.id, capacity=self.capacity, balls=list(self.balls))


@dataclass
class Board:
    """An ordered set of tubes.

    Tube order is the display order; tubes are addressed by their ``id``.
    """

    tubes: list[Tube]
    _by_id: dict[int, Tube] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._by_id = {t.id: t for t in self.tubes}
        if len(self._by_id) != len(self.tubes):
            raise ValueError("Tube ids must be unique.")

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_lists(cls, capacity: int, tubes: list[list[Color]]) -> Board:
        """Create a board from bottom-to-top color lists; ids are 1-based.

        Example::

            Board.from_lists(2, [[0, 0], [1, 1], [], []])
        """
        return cls(
            tubes=[
                Tube.from_colors(i + 1, capacity, colors)
                for i, colors in enumerate(tubes)
            ]
        )

    # -- queries --------------------------------------------------------------

    def tube(self, tube_id: int) -> Tube | None:
        return self._by_id.get(tube_id)

    def tube_ids(self) -> list[int]:
        return [t.id for t in self.tubes]

    def color_counts(self) -> Counter[Color]:
        return Counter(b.color for t in self.tubes for b in t.balls)

    def empty_tube_count(self) -> int:
        return sum(1 for t in self.tubes if t.is_empty)

    def can_move(self, from_tube_id: int, to_tube_id: int) -> bool:
        if from_tube_id == to_tube_id:
            return False
        src = self._by_id.get(from_tube_id)
        dst = self._by_id.get(to_tube_id)
        if src is None or dst is None or src.is_empty:
            return False
        return dst.can_receive(src.balls[-1].color)

    def legal_moves(self) -> list[tuple[int, int]]:
        """All legal ``(from, to)`` pairs in source order, then destination order."""
        moves: list[tuple[int, int]] = []
        for src in self.tubes:
            if src.is_empty:
                continue
            color = src.balls[-1].color
            for dst in self.tubes:
                if dst is not src and dst.can_receive(color):
                    moves.append((src.id, dst.id))
        return moves

    def is_won(self) -> bool:
        return all(t.is_empty or t.is_complete for t in self.tubes)

    def has_legal_move(self) -> bool:
        return any(
            self.can_move(src.id, dst.id)
            for src in self.tubes
            if not src.is_empty
            for dst in self.tubes
        )

    def signature(self) -> str:
        """Canonical state hash: per-tube color codes, tubes in board order."""
        return "|".join(
            ",".join(str(b.color) for b in t.balls) for t in self.tubes
        )

    # -- mutation -------------------------------------------------------------

    def transfer(self, from_tube_id: int, to_tube_id: int) -> Color:
        """Move the top ball without any legality check; returns its color.

        Only the two affected tubes are touched.
        """
        src = self._by_id[from_tube_id]
        dst = self._by_id[to_tube_id]
        if dst.is_full:
            raise ValueError(f"Tube {dst.id} is full.")
        ball = src.pop()
        dst.push(ball.color)
        return ball.color

    def copy(self) -> Board:
        return Board(tubes=[t.copy() for t in self.tubes])
