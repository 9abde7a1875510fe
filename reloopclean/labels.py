"""Label identities for structured blocks and loops.

The relooper attaches a label to every block or loop that a ``break`` may
target.  Labels are never reused, so a break naming a label refers to exactly
one enclosing construct.  Identity is the ``(kind, index)`` pair; the textual
form returned by :meth:`Label.render` is derived for display only and must not
be used for comparisons.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Set


class LabelKind(Enum):
    """Origin of a label."""

    SOURCE = "source"
    SYNTHETIC = "synthetic"

    @property
    def prefix(self) -> str:
        return "l" if self is LabelKind.SOURCE else "s"


@dataclass(frozen=True)
class Label:
    """Opaque, hashable label identity."""

    kind: LabelKind
    index: int

    def render(self) -> str:
        return f"'{self.kind.prefix}_{self.index}"

    def __str__(self) -> str:
        return self.render()


class LabelAllocator:
    """Hand out label identities without ever reusing one.

    Source labels keep the index of the construct they were derived from and
    may only be registered once.  Synthetic labels are numbered from a private
    counter.
    """

    def __init__(self) -> None:
        self._next_synthetic = 0
        self._source: Set[int] = set()
        self._interned: Dict[Label, Label] = {}

    def fresh(self) -> Label:
        label = Label(LabelKind.SYNTHETIC, self._next_synthetic)
        self._next_synthetic += 1
        self._interned[label] = label
        return label

    def source(self, index: int) -> Label:
        if index in self._source:
            raise ValueError(f"source label {index} registered twice")
        self._source.add(index)
        label = Label(LabelKind.SOURCE, index)
        self._interned[label] = label
        return label

    def intern(self, kind: LabelKind, index: int) -> Label:
        """Return the shared instance for ``(kind, index)``.

        Used when labels are rebuilt from serialised data: every reference to
        the same identity resolves to one object.
        """

        key = Label(kind, index)
        existing = self._interned.get(key)
        if existing is not None:
            return existing
        self._interned[key] = key
        if kind is LabelKind.SYNTHETIC and index >= self._next_synthetic:
            self._next_synthetic = index + 1
        elif kind is LabelKind.SOURCE:
            self._source.add(index)
        return key

    def __len__(self) -> int:
        return len(self._interned)


__all__ = ["Label", "LabelAllocator", "LabelKind"]
