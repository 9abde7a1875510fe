"""JSON mapping of relooped regions.

Regions are exchanged as plain dictionaries with an explicit ``"op"`` tag per
node so that the command line tool (and tests) can describe trees without
constructing dataclasses by hand.  Labels are interned while loading: every
reference to the same ``(kind, index)`` pair resolves to one :class:`Label`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from .context import TailContext, TailKind
from .labels import Label, LabelAllocator, LabelKind
from .tree import (
    LITERAL_KINDS,
    BlockExpr,
    BreakExpr,
    CallExpr,
    ConditionalExpr,
    DispatchArm,
    DispatchExpr,
    EffectStatement,
    Expression,
    ExprStatement,
    LiteralExpr,
    LocalStatement,
    LoopExpr,
    NameExpr,
    ReturnExpr,
    Statement,
)


class TreeFormatError(ValueError):
    """Raised when a serialised region cannot be decoded."""


# ---------------------------------------------------------------------------
# serialisation
# ---------------------------------------------------------------------------


def serialize_label(label: Label) -> Dict[str, Any]:
    return {"kind": label.kind.value, "index": label.index}


def serialize_context(context: TailContext) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"kind": context.kind.value}
    if context.label is not None:
        payload["label"] = serialize_label(context.label)
    return payload


def serialize_statement(statement: Statement) -> Dict[str, Any]:
    """Serialise a statement into a dictionary with an explicit type tag."""

    if isinstance(statement, EffectStatement):
        return {"op": "effect", "expr": serialize_expression(statement.expression)}
    if isinstance(statement, ExprStatement):
        return {"op": "expr", "expr": serialize_expression(statement.expression)}
    if isinstance(statement, LocalStatement):
        payload: Dict[str, Any] = {"op": "local", "name": statement.name}
        if statement.value is not None:
            payload["value"] = serialize_expression(statement.value)
        return payload
    raise TypeError(f"unsupported statement type: {type(statement)!r}")


def serialize_expression(expr: Expression) -> Dict[str, Any]:
    """Serialise an expression node into a dictionary."""

    if isinstance(expr, LiteralExpr):
        payload: Dict[str, Any] = {"op": "literal", "kind": expr.kind, "value": expr.value}
        if expr.suffix is not None:
            payload["suffix"] = expr.suffix
        return payload
    if isinstance(expr, NameExpr):
        return {"op": "name", "name": expr.name}
    if isinstance(expr, CallExpr):
        return {
            "op": "call",
            "callee": serialize_expression(expr.callee),
            "args": [serialize_expression(arg) for arg in expr.arguments],
        }
    if isinstance(expr, BreakExpr):
        payload = {"op": "break"}
        if expr.label is not None:
            payload["label"] = serialize_label(expr.label)
        if expr.value is not None:
            payload["value"] = serialize_expression(expr.value)
        return payload
    if isinstance(expr, ReturnExpr):
        payload = {"op": "return"}
        if expr.value is not None:
            payload["value"] = serialize_expression(expr.value)
        return payload
    if isinstance(expr, BlockExpr):
        payload = {
            "op": "block",
            "statements": [serialize_statement(stmt) for stmt in expr.statements],
        }
        if expr.label is not None:
            payload["label"] = serialize_label(expr.label)
        return payload
    if isinstance(expr, LoopExpr):
        payload = {"op": "loop", "body": serialize_expression(expr.body)}
        if expr.label is not None:
            payload["label"] = serialize_label(expr.label)
        return payload
    if isinstance(expr, ConditionalExpr):
        payload = {
            "op": "if",
            "condition": serialize_expression(expr.condition),
            "then": serialize_expression(expr.then_block),
        }
        if expr.else_expr is not None:
            payload["else"] = serialize_expression(expr.else_expr)
        return payload
    if isinstance(expr, DispatchExpr):
        return {
            "op": "match",
            "scrutinee": serialize_expression(expr.scrutinee),
            "arms": [
                {
                    "pattern": serialize_expression(arm.pattern),
                    "body": serialize_expression(arm.body),
                }
                for arm in expr.arms
            ],
        }
    raise TypeError(f"unsupported expression type: {type(expr)!r}")


def serialize_region(context: TailContext, statements: List[Statement]) -> Dict[str, Any]:
    return {
        "context": serialize_context(context),
        "statements": [serialize_statement(stmt) for stmt in statements],
    }


# ---------------------------------------------------------------------------
# loading
# ---------------------------------------------------------------------------


class TreeLoader:
    """Rebuild tree nodes from serialised dictionaries."""

    def __init__(self, labels: Optional[LabelAllocator] = None) -> None:
        self.labels = labels if labels is not None else LabelAllocator()

    # ------------------------------------------------------------------
    def load_label(self, payload: Any) -> Label:
        mapping = _expect_mapping(payload, "label")
        try:
            kind = LabelKind(mapping.get("kind"))
        except ValueError:
            raise TreeFormatError(f"unknown label kind: {mapping.get('kind')!r}") from None
        index = mapping.get("index")
        if type(index) is not int or index < 0:
            raise TreeFormatError(f"label index must be a non-negative integer: {index!r}")
        return self.labels.intern(kind, index)

    def load_context(self, payload: Any) -> TailContext:
        mapping = _expect_mapping(payload, "context")
        try:
            kind = TailKind(mapping.get("kind"))
        except ValueError:
            raise TreeFormatError(f"unknown context kind: {mapping.get('kind')!r}") from None
        label = self._optional_label(mapping)
        try:
            return TailContext(kind, label)
        except ValueError as exc:
            raise TreeFormatError(str(exc)) from exc

    # ------------------------------------------------------------------
    def load_statements(self, payload: Any) -> List[Statement]:
        if not isinstance(payload, list):
            raise TreeFormatError(f"expected a list of statements, got {type(payload).__name__}")
        return [self.load_statement(item) for item in payload]

    def load_statement(self, payload: Any) -> Statement:
        mapping = _expect_mapping(payload, "statement")
        op = mapping.get("op")
        if op == "effect":
            return EffectStatement(self.load_expression(_require(mapping, "expr")))
        if op == "expr":
            return ExprStatement(self.load_expression(_require(mapping, "expr")))
        if op == "local":
            name = _require(mapping, "name")
            if not isinstance(name, str):
                raise TreeFormatError("local name must be a string")
            return LocalStatement(name, self._optional_expression(mapping, "value"))
        raise TreeFormatError(f"unknown statement op: {op!r}")

    def load_expression(self, payload: Any) -> Expression:
        mapping = _expect_mapping(payload, "expression")
        op = mapping.get("op")
        if op == "literal":
            return self._load_literal(mapping)
        if op == "name":
            name = _require(mapping, "name")
            if not isinstance(name, str):
                raise TreeFormatError("name must be a string")
            return NameExpr(name)
        if op == "call":
            args = mapping.get("args", [])
            if not isinstance(args, list):
                raise TreeFormatError("call args must be a list")
            return CallExpr(
                self.load_expression(_require(mapping, "callee")),
                [self.load_expression(arg) for arg in args],
            )
        if op == "break":
            return BreakExpr(self._optional_label(mapping), self._optional_expression(mapping, "value"))
        if op == "return":
            return ReturnExpr(self._optional_expression(mapping, "value"))
        if op == "block":
            return self.load_block(mapping)
        if op == "loop":
            return LoopExpr(self.load_block(_require(mapping, "body")), self._optional_label(mapping))
        if op == "if":
            return ConditionalExpr(
                self.load_expression(_require(mapping, "condition")),
                self.load_block(_require(mapping, "then")),
                self._optional_expression(mapping, "else"),
            )
        if op == "match":
            arms = _require(mapping, "arms")
            if not isinstance(arms, list):
                raise TreeFormatError("match arms must be a list")
            return DispatchExpr(
                self.load_expression(_require(mapping, "scrutinee")),
                [self._load_arm(arm) for arm in arms],
            )
        raise TreeFormatError(f"unknown expression op: {op!r}")

    def load_block(self, payload: Any) -> BlockExpr:
        mapping = _expect_mapping(payload, "block")
        if mapping.get("op") != "block":
            raise TreeFormatError(f"expected a block, got {mapping.get('op')!r}")
        statements = self.load_statements(mapping.get("statements", []))
        return BlockExpr(statements, self._optional_label(mapping))

    def load_region(self, payload: Any) -> Tuple[TailContext, List[Statement]]:
        mapping = _expect_mapping(payload, "region")
        context = self.load_context(_require(mapping, "context"))
        statements = self.load_statements(_require(mapping, "statements"))
        return context, statements

    # ------------------------------------------------------------------
    def _load_literal(self, mapping: Mapping[str, Any]) -> LiteralExpr:
        kind = mapping.get("kind")
        if kind not in LITERAL_KINDS:
            raise TreeFormatError(f"unknown literal kind: {kind!r}")
        value = mapping.get("value")
        if kind == "int" and type(value) is not int:
            raise TreeFormatError(f"int literal carries non-integer value {value!r}")
        if kind == "float" and type(value) not in (int, float):
            raise TreeFormatError(f"float literal carries non-numeric value {value!r}")
        if kind == "float":
            value = float(value)
        suffix = mapping.get("suffix")
        if suffix is not None and not isinstance(suffix, str):
            raise TreeFormatError("literal suffix must be a string")
        return LiteralExpr(kind, value, suffix)

    def _load_arm(self, payload: Any) -> DispatchArm:
        mapping = _expect_mapping(payload, "match arm")
        return DispatchArm(
            self.load_expression(_require(mapping, "pattern")),
            self.load_expression(_require(mapping, "body")),
        )

    def _optional_label(self, mapping: Mapping[str, Any]) -> Optional[Label]:
        payload = mapping.get("label")
        if payload is None:
            return None
        return self.load_label(payload)

    def _optional_expression(self, mapping: Mapping[str, Any], key: str) -> Optional[Expression]:
        payload = mapping.get(key)
        if payload is None:
            return None
        return self.load_expression(payload)


def _expect_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise TreeFormatError(f"expected {what} object, got {type(payload).__name__}")
    return payload


def _require(mapping: Mapping[str, Any], key: str) -> Any:
    if key not in mapping:
        raise TreeFormatError(f"missing field {key!r} in {mapping.get('op', 'node')!r}")
    return mapping[key]


def load_region(payload: Any) -> Tuple[TailContext, List[Statement]]:
    """Decode ``{"context": ..., "statements": [...]}``."""

    return TreeLoader().load_region(payload)


__all__ = [
    "TreeFormatError",
    "TreeLoader",
    "load_region",
    "serialize_context",
    "serialize_expression",
    "serialize_label",
    "serialize_region",
    "serialize_statement",
]
