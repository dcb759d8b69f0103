"""Container stack: the open arrays and objects, innermost last."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum, auto
from typing import Iterator

from .errors import ImpossibleStateError


class Container(Enum):
    NONE = auto()      # below the stack base; never pushed
    ARRAY = auto()
    OBJECT = auto()


class ContainerStack:
    """Records which composites are open so the formatter can indent.

    ``depth()`` is the number of open containers and doubles as the
    indentation level.
    """

    def __init__(self) -> None:
        self._items: list[Container] = []

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ContainerStack({[c.name for c in self._items]})"

    def push(self, kind: Container) -> None:
        self._items.append(kind)

    def pop(self) -> Container:
        if not self._items:
            raise ImpossibleStateError("pop from empty container stack")
        return self._items.pop()

    def get(self, i: int) -> Container:
        """Return the kind *i* levels below the top, or ``Container.NONE``."""
        n = len(self._items)
        if i >= n:
            return Container.NONE
        return self._items[n - i - 1]

    def top(self) -> Container:
        return self.get(0)

    def next(self) -> Container:
        return self.get(1)

    def depth(self) -> int:
        return len(self._items)

    @contextmanager
    def entered(self, kind: Container) -> Iterator[None]:
        """Push *kind* for the duration of the block, popping on any exit."""
        self.push(kind)
        try:
            yield
        finally:
            self.pop()
