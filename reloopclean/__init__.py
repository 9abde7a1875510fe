"""Public package exports for the relooper tail cleanup pass."""

from .cleanup import TailCleanup, is_idempotent_tail, remove_tail_expr, simplify_if
from .context import TailContext, TailKind
from .labels import Label, LabelAllocator, LabelKind
from .serialize import TreeFormatError, TreeLoader, load_region, serialize_region
from .tree import render_statements

__all__ = [
    "Label",
    "LabelAllocator",
    "LabelKind",
    "TailCleanup",
    "TailContext",
    "TailKind",
    "TreeFormatError",
    "TreeLoader",
    "is_idempotent_tail",
    "load_region",
    "remove_tail_expr",
    "render_statements",
    "serialize_region",
    "simplify_if",
]
