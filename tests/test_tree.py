import pytest

from reloopclean.labels import LabelAllocator
from reloopclean.tree import (
    BlockExpr,
    BreakExpr,
    CallExpr,
    ConditionalExpr,
    DispatchArm,
    DispatchExpr,
    EffectStatement,
    ExprStatement,
    LiteralExpr,
    LocalStatement,
    LoopExpr,
    NameExpr,
    ReturnExpr,
    int_literal,
    render_statements,
    unit_literal,
    wrap_block,
)
from reloopclean.writer import SourceWriter


def test_literal_rendering() -> None:
    assert int_literal(0).render() == "0"
    assert int_literal(0, "i32").render() == "0i32"
    assert LiteralExpr("float", 0.0).render() == "0.0"
    assert LiteralExpr("bool", True).render() == "true"
    assert LiteralExpr("str", "hi").render() == '"hi"'
    assert unit_literal().render() == "()"


def test_branch_rendering() -> None:
    label = LabelAllocator().fresh()
    assert BreakExpr().render() == "break"
    assert BreakExpr(label).render() == "break 's_0"
    assert BreakExpr(label, int_literal(1)).render() == "break 's_0 1"
    assert ReturnExpr().render() == "return"
    assert ReturnExpr(int_literal(0)).render() == "return 0"


def test_conditional_with_else_renders_both_branches() -> None:
    label = LabelAllocator().fresh()
    statement = ExprStatement(
        ConditionalExpr(
            NameExpr("c"),
            wrap_block([EffectStatement(BreakExpr(label))]),
            wrap_block([EffectStatement(BreakExpr(label))]),
        )
    )
    assert render_statements([statement]) == (
        "if c {\n"
        "    break 's_0;\n"
        "} else {\n"
        "    break 's_0;\n"
        "}\n"
    )


def test_empty_conditional_and_else_if_chain() -> None:
    assert render_statements([ExprStatement(ConditionalExpr(NameExpr("c"), BlockExpr()))]) == "if c {}\n"
    chained = ConditionalExpr(
        NameExpr("c"),
        BlockExpr(),
        ConditionalExpr(NameExpr("d"), BlockExpr(), BlockExpr()),
    )
    assert render_statements([ExprStatement(chained)]) == "if c {\n} else if d {\n} else {}\n"


def test_dispatch_labelled_block_and_loop_rendering() -> None:
    allocator = LabelAllocator()
    outer, inner = allocator.fresh(), allocator.fresh()
    dispatch = DispatchExpr(
        NameExpr("x"),
        [
            DispatchArm(int_literal(0), wrap_block([EffectStatement(CallExpr(NameExpr("a")))])),
            DispatchArm(NameExpr("_"), BlockExpr()),
        ],
    )
    region = [
        LocalStatement("y", int_literal(1)),
        ExprStatement(BlockExpr([ExprStatement(dispatch)], outer)),
        ExprStatement(LoopExpr(wrap_block([EffectStatement(BreakExpr(inner))]), inner)),
    ]
    assert render_statements(region, indent="  ") == (
        "let y = 1;\n"
        "'s_0: {\n"
        "  match x {\n"
        "    0 => {\n"
        "      a();\n"
        "    },\n"
        "    _ => {},\n"
        "  }\n"
        "}\n"
        "'s_1: loop {\n"
        "  break 's_1;\n"
        "}\n"
    )


def test_structured_expression_renders_on_one_line() -> None:
    conditional = ConditionalExpr(NameExpr("c"), wrap_block([EffectStatement(ReturnExpr())]))
    assert conditional.render() == "if c { return; }"


def test_writer_rejects_dedent_underflow() -> None:
    writer = SourceWriter()
    with writer.indented():
        writer.write_line("x")
    assert writer.render() == "    x\n"
    with pytest.raises(ValueError, match="underflow"):
        writer.dedent()
