"""Implicit fallthrough context of one cleanup run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .labels import Label


class TailKind(Enum):
    RETURN_ZERO = "return_zero"
    RETURN_VOID = "return_void"
    BREAK_TO = "break_to"


@dataclass(frozen=True)
class TailContext:
    """Describe what happens when control falls off the end of a region.

    ``RETURN_ZERO``
        The region is the body of a function whose implicit fallthrough
        returns the integer ``0`` (C ``main``).
    ``RETURN_VOID``
        The region is the body of a function returning nothing.
    ``BREAK_TO``
        The region is the body of the construct labelled ``label``; falling
        off the end is equivalent to a valueless ``break`` to that label.
    """

    kind: TailKind
    label: Optional[Label] = None

    def __post_init__(self) -> None:
        if self.kind is TailKind.BREAK_TO and self.label is None:
            raise ValueError("break context requires a label")
        if self.kind is not TailKind.BREAK_TO and self.label is not None:
            raise ValueError(f"{self.kind.value} context does not take a label")

    @classmethod
    def return_zero(cls) -> "TailContext":
        return cls(TailKind.RETURN_ZERO)

    @classmethod
    def return_void(cls) -> "TailContext":
        return cls(TailKind.RETURN_VOID)

    @classmethod
    def break_to(cls, label: Label) -> "TailContext":
        return cls(TailKind.BREAK_TO, label)

    @classmethod
    def for_function(
        cls,
        *,
        returns_zero: bool = False,
        returns_void: bool = False,
        break_label: Optional[Label] = None,
    ) -> "TailContext":
        """Derive the context from the convention of the enclosing function."""

        if returns_zero and returns_void:
            raise ValueError("function cannot both return zero and return nothing")
        if returns_zero:
            return cls.return_zero()
        if returns_void:
            return cls.return_void()
        if break_label is None:
            raise ValueError("no implicit return convention and no break label")
        return cls.break_to(break_label)

    def describe(self) -> str:
        if self.kind is TailKind.BREAK_TO:
            return f"break {self.label}"
        if self.kind is TailKind.RETURN_ZERO:
            return "return 0"
        return "return"


__all__ = ["TailContext", "TailKind"]
