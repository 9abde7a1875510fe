"""Statement and expression nodes of relooped function bodies.

The relooper turns an arbitrary control-flow graph into a tree of nested
blocks, loops, conditionals and ``match`` style dispatches.  This module
models the small, closed set of node kinds that appear in that output as plain
dataclasses.  The tree is mutable: statement lists are ordinary ``list``
objects so that passes such as :class:`reloopclean.cleanup.TailCleanup` can
edit them in place.

Every node knows how to write itself to a :class:`~reloopclean.writer.SourceWriter`
using a compact Rust-like notation.  The output is meant for dumps and tests,
it is not a code generator.
"""

from __future__ import annotations

import json

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .labels import Label
from .writer import SourceWriter


LITERAL_KINDS = ("int", "float", "bool", "str", "unit")


# ---------------------------------------------------------------------------
# expression nodes
# ---------------------------------------------------------------------------


class Expression:
    """Base class for all expression nodes."""

    def render(self) -> str:
        raise NotImplementedError

    def emit(self, writer: SourceWriter, prefix: str = "", suffix: str = "") -> None:
        writer.write_line(f"{prefix}{self.render()}{suffix}")


class StructuredExpression(Expression):
    """Expression that owns nested statement lists and spans several lines."""

    def emit(self, writer: SourceWriter, prefix: str = "", suffix: str = "") -> None:
        raise NotImplementedError

    def render(self) -> str:
        writer = SourceWriter(indent="")
        self.emit(writer)
        return " ".join(writer.lines)


@dataclass
class LiteralExpr(Expression):
    kind: str
    value: object = None
    suffix: Optional[str] = None

    def render(self) -> str:
        if self.kind == "unit":
            return "()"
        if self.kind == "bool":
            return "true" if self.value else "false"
        if self.kind == "str":
            return json.dumps(self.value)
        return f"{self.value!r}{self.suffix or ''}"


@dataclass
class NameExpr(Expression):
    name: str

    def render(self) -> str:
        return self.name


@dataclass
class CallExpr(Expression):
    callee: Expression
    arguments: Sequence[Expression] = field(default_factory=list)

    def render(self) -> str:
        args = ", ".join(arg.render() for arg in self.arguments)
        return f"{self.callee.render()}({args})"


@dataclass
class BreakExpr(Expression):
    label: Optional[Label] = None
    value: Optional[Expression] = None

    def render(self) -> str:
        text = "break"
        if self.label is not None:
            text += f" {self.label.render()}"
        if self.value is not None:
            text += f" {self.value.render()}"
        return text


@dataclass
class ReturnExpr(Expression):
    value: Optional[Expression] = None

    def render(self) -> str:
        if self.value is None:
            return "return"
        return f"return {self.value.render()}"


@dataclass
class BlockExpr(StructuredExpression):
    statements: List["Statement"] = field(default_factory=list)
    label: Optional[Label] = None

    def extend(self, other: Iterable["Statement"]) -> None:
        for statement in other:
            self.statements.append(statement)

    def emit(self, writer: SourceWriter, prefix: str = "", suffix: str = "") -> None:
        opener = prefix
        if self.label is not None:
            opener += f"{self.label.render()}: "
        _emit_braced(writer, opener, self.statements, suffix)


@dataclass
class LoopExpr(StructuredExpression):
    body: BlockExpr
    label: Optional[Label] = None

    def emit(self, writer: SourceWriter, prefix: str = "", suffix: str = "") -> None:
        opener = prefix
        if self.label is not None:
            opener += f"{self.label.render()}: "
        _emit_braced(writer, f"{opener}loop ", self.body.statements, suffix)


@dataclass
class ConditionalExpr(StructuredExpression):
    condition: Expression
    then_block: BlockExpr
    else_expr: Optional[Expression] = None

    def emit(self, writer: SourceWriter, prefix: str = "", suffix: str = "") -> None:
        head = f"{prefix}if {self.condition.render()} "
        if self.else_expr is None:
            _emit_braced(writer, head, self.then_block.statements, suffix)
            return
        writer.write_line(f"{head}{{")
        _emit_body(writer, self.then_block.statements)
        branch = self.else_expr
        if isinstance(branch, ConditionalExpr):
            branch.emit(writer, "} else ", suffix)
        elif isinstance(branch, BlockExpr) and branch.label is None:
            _emit_braced(writer, "} else ", branch.statements, suffix)
        else:
            writer.write_line("} else {")
            with writer.indented():
                branch.emit(writer)
            writer.write_line("}" + suffix)


@dataclass
class DispatchArm:
    pattern: Expression
    body: Expression


@dataclass
class DispatchExpr(StructuredExpression):
    scrutinee: Expression
    arms: List[DispatchArm] = field(default_factory=list)

    def emit(self, writer: SourceWriter, prefix: str = "", suffix: str = "") -> None:
        writer.write_line(f"{prefix}match {self.scrutinee.render()} {{")
        with writer.indented():
            for arm in self.arms:
                arm.body.emit(writer, f"{arm.pattern.render()} => ", ",")
        writer.write_line("}" + suffix)


# ---------------------------------------------------------------------------
# statement nodes
# ---------------------------------------------------------------------------


class Statement:
    """Base class for all statements."""

    def emit(self, writer: SourceWriter) -> None:
        raise NotImplementedError


@dataclass
class EffectStatement(Statement):
    """Expression evaluated for its effect only (``expr;``)."""

    expression: Expression

    def emit(self, writer: SourceWriter) -> None:
        self.expression.emit(writer, "", ";")


@dataclass
class ExprStatement(Statement):
    """Expression in statement position without a terminating semicolon."""

    expression: Expression

    def emit(self, writer: SourceWriter) -> None:
        self.expression.emit(writer)


@dataclass
class LocalStatement(Statement):
    name: str
    value: Optional[Expression] = None

    def emit(self, writer: SourceWriter) -> None:
        if self.value is None:
            writer.write_line(f"let {self.name};")
        else:
            self.value.emit(writer, f"let {self.name} = ", ";")


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _emit_body(writer: SourceWriter, statements: Sequence[Statement]) -> None:
    with writer.indented():
        for statement in statements:
            statement.emit(writer)


def _emit_braced(
    writer: SourceWriter, opener: str, statements: Sequence[Statement], closer: str
) -> None:
    if not statements:
        writer.write_line(f"{opener}{{}}{closer}")
        return
    writer.write_line(f"{opener}{{")
    _emit_body(writer, statements)
    writer.write_line("}" + closer)


def int_literal(value: int, suffix: Optional[str] = None) -> LiteralExpr:
    return LiteralExpr("int", value, suffix)


def unit_literal() -> LiteralExpr:
    return LiteralExpr("unit")


def wrap_block(statements: Iterable[Statement], label: Optional[Label] = None) -> BlockExpr:
    block = BlockExpr(label=label)
    block.extend(statements)
    return block


def render_statements(statements: Iterable[Statement], *, indent: str = "    ") -> str:
    """Return the text dump of ``statements``."""

    writer = SourceWriter(indent=indent)
    for statement in statements:
        statement.emit(writer)
    return writer.render()


__all__ = [
    "LITERAL_KINDS",
    "Expression",
    "StructuredExpression",
    "LiteralExpr",
    "NameExpr",
    "CallExpr",
    "BreakExpr",
    "ReturnExpr",
    "BlockExpr",
    "LoopExpr",
    "ConditionalExpr",
    "DispatchArm",
    "DispatchExpr",
    "Statement",
    "EffectStatement",
    "ExprStatement",
    "LocalStatement",
    "int_literal",
    "unit_literal",
    "wrap_block",
    "render_statements",
]
