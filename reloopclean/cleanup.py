"""Removal of redundant terminal branches from relooped regions.

The relooper is conservative: every block it synthesises ends with an explicit
``break`` to an enclosing label or a ``return``, even when falling off the end
of the block would reach the same place.  :class:`TailCleanup` walks the tail
positions of a region and drops those terminals when they are syntactically
identical to the implicit fallthrough described by a
:class:`~reloopclean.context.TailContext`.

Only three shapes are ever removed (see :func:`is_idempotent_tail`).  Nothing
here reasons about reachability; when a terminal cannot be matched exactly it
stays, and so does the label of the block it targets.
"""

from __future__ import annotations

import logging

from typing import List

from .context import TailContext, TailKind
from .tree import (
    BlockExpr,
    BreakExpr,
    ConditionalExpr,
    DispatchExpr,
    EffectStatement,
    ExprStatement,
    LiteralExpr,
    ReturnExpr,
    Statement,
)


logger = logging.getLogger(__name__)


def is_idempotent_tail(context: TailContext, statement: Statement) -> bool:
    """Return ``True`` when ``statement`` repeats the implicit fallthrough.

    Only a terminated effect statement qualifies.  Under ``RETURN_ZERO`` it
    must be ``return 0`` with an unsuffixed integer literal; under
    ``RETURN_VOID`` a bare ``return``; under ``BREAK_TO`` a valueless break to
    exactly the context label.
    """

    if not isinstance(statement, EffectStatement):
        return False
    expr = statement.expression

    if context.kind is TailKind.RETURN_ZERO:
        if not isinstance(expr, ReturnExpr):
            return False
        value = expr.value
        return (
            isinstance(value, LiteralExpr)
            and value.kind == "int"
            and value.suffix is None
            and type(value.value) is int
            and value.value == 0
        )

    if context.kind is TailKind.RETURN_VOID:
        return isinstance(expr, ReturnExpr) and expr.value is None

    return (
        isinstance(expr, BreakExpr)
        and expr.value is None
        and expr.label is not None
        and expr.label == context.label
    )


def simplify_if(statement: Statement) -> Statement:
    """Drop an empty ``else {}`` from a conditional statement.

    Only the outermost node of an unterminated expression statement is
    inspected.  The returned statement is a new node when something changed,
    otherwise ``statement`` itself.
    """

    if not isinstance(statement, ExprStatement):
        return statement
    expr = statement.expression
    if not isinstance(expr, ConditionalExpr):
        return statement
    branch = expr.else_expr
    if not isinstance(branch, BlockExpr) or branch.label is not None or branch.statements:
        return statement
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("collapsing empty else branch of 'if %s'", expr.condition.render())
    simplified = ConditionalExpr(expr.condition, expr.then_block, None)
    return ExprStatement(simplified)


class TailCleanup:
    """Recursive driver removing idempotent tail statements.

    One instance is bound to a single :class:`TailContext`.  The same context
    applies to every nested tail position: the last statement of a branch that
    sits in tail position is itself in tail position.
    """

    def __init__(self, context: TailContext) -> None:
        self.context = context
        self.removed = 0

    def remove_tail_expr(self, statements: List[Statement]) -> bool:
        """Remove redundant terminals from ``statements`` in place.

        Returns ``True`` if a terminal was removed anywhere in the visited
        subtree.  Removing the (unique) break to a label is the only way to
        know that the label is no longer needed.
        """

        if not statements:
            return False
        statement = statements.pop()

        if is_idempotent_tail(self.context, statement):
            self.removed += 1
            logger.debug(
                "removed redundant tail statement under %s context",
                self.context.describe(),
            )
            return True

        removed = False
        if isinstance(statement, ExprStatement):
            expr = statement.expression
            if isinstance(expr, ConditionalExpr):
                removed = self.remove_tail_expr(expr.then_block.statements)
                branch = expr.else_expr
                if isinstance(branch, BlockExpr):
                    removed = self.remove_tail_expr(branch.statements) or removed
            elif isinstance(expr, DispatchExpr):
                for arm in expr.arms:
                    if isinstance(arm.body, BlockExpr):
                        removed = self.remove_tail_expr(arm.body.statements) or removed

        statements.append(simplify_if(statement))
        return removed


def remove_tail_expr(context: TailContext, statements: List[Statement]) -> bool:
    """Run a one-off :class:`TailCleanup` over ``statements``."""

    return TailCleanup(context).remove_tail_expr(statements)


__all__ = ["TailCleanup", "is_idempotent_tail", "remove_tail_expr", "simplify_if"]
