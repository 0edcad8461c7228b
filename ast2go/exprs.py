from typing import Dict, List

from ast2go.context import RenderContext
from ast2go.errors import UnsupportedConstructError
from ast2go.functions import function_signature
from ast2go.nodes import Node, Rendered
from ast2go.typemap import cast, go_identifier, promote, resolve_type

SHIFT_OPS = {"<<", ">>"}
COMPARISON_OPS = {"==", "!=", "<", "<=", ">", ">="}
LOGICAL_OPS = {"&&", "||"}
COMPOUND_ASSIGN_OPS = {"+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<=", ">>="}

# Go binds & << >> as tightly as *, and | ^ as loosely as +.
_GO_PREC: Dict[str, int] = {
    "*": 5,
    "/": 5,
    "%": 5,
    "<<": 5,
    ">>": 5,
    "&": 5,
    "+": 4,
    "-": 4,
    "|": 4,
    "^": 4,
    "==": 3,
    "!=": 3,
    "<": 3,
    "<=": 3,
    ">": 3,
    ">=": 3,
    "&&": 2,
    "||": 1,
}

_RUNE_ESCAPES: Dict[int, str] = {
    7: "\\a",
    8: "\\b",
    9: "\\t",
    10: "\\n",
    11: "\\v",
    12: "\\f",
    13: "\\r",
    39: "\\'",
    92: "\\\\",
}


def strip_casts(node: Node) -> Node:
    while node.kind == "ImplicitCastExpr" and node.children:
        node = node.children[0]
    return node


def only_child(node: Node) -> Node:
    if len(node.children) != 1:
        raise UnsupportedConstructError(
            node.kind, f"expected one operand, found {len(node.children)}", node.address
        )
    return node.children[0]


def require_statement(node: Node, ctx: RenderContext, what: str) -> None:
    # Go has no assignment or ++/-- expressions
    if not ctx.in_statement_position(node):
        raise UnsupportedConstructError(
            node.kind, f"{what} used as a value", node.address
        )


def wrap(text: str) -> str:
    if " " in text or text[:1] in ("-", "+", "^", "!", "&", "*"):
        if not (text.startswith("(") and text.endswith(")")):
            return f"({text})"
    return text


def negate(cond: str) -> str:
    return f"!{wrap(cond)}"


def go_rune(value: int) -> str:
    if value < 0:
        value &= 0xFF
    if value in _RUNE_ESCAPES:
        return f"'{_RUNE_ESCAPES[value]}'"
    if 32 <= value < 127:
        return f"'{chr(value)}'"
    if value < 0x100:
        return f"'\\x{value:02x}'"
    if value < 0x10000:
        return f"'\\u{value:04x}'"
    return f"'\\U{value:08x}'"


def render_integer_literal(node: Node, ctx: RenderContext) -> Rendered:
    return node.value("value"), node.value("type")


def render_floating_literal(node: Node, ctx: RenderContext) -> Rendered:
    raw = node.value("value")
    try:
        number = float(raw)
    except ValueError:
        raise UnsupportedConstructError(node.kind, f"floating value {raw!r}", node.address)
    text = repr(number)
    if text in ("inf", "-inf", "nan"):
        raise UnsupportedConstructError(node.kind, f"floating value {raw!r}", node.address)
    return text, node.value("type")


def render_character_literal(node: Node, ctx: RenderContext) -> Rendered:
    return go_rune(int(node.value("value"))), "char"


def render_string_literal(node: Node, ctx: RenderContext) -> Rendered:
    return node.value("value"), "char *"


def render_decl_ref_expr(node: Node, ctx: RenderContext) -> Rendered:
    return go_identifier(node.value("name")), node.value("type")


def render_paren_expr(node: Node, ctx: RenderContext) -> Rendered:
    text, t = only_child(node).render(ctx)
    return f"({text})", t


def render_constant_expr(node: Node, ctx: RenderContext) -> Rendered:
    return only_child(node).render(ctx)


def render_cast_expr(node: Node, ctx: RenderContext) -> Rendered:
    text, t = only_child(node).render(ctx)
    to_type = node.value("type")
    kind = node.value("cast")
    if kind == "ToVoid":
        require_statement(node, ctx, "discarded value")
        return f"_ = {text}", to_type
    return cast(ctx, text, t, to_type, kind), to_type


def _operand(node: Node, ctx: RenderContext, parent_prec: int, right: bool) -> Rendered:
    text, t = node.render(ctx)
    inner = strip_casts(node)
    if inner.kind in ("BinaryOperator", "CompoundAssignOperator"):
        prec = _GO_PREC.get(inner.value("operator"), 0)
        if prec < parent_prec or (right and prec == parent_prec):
            text = f"({text})"
    return text, t


def render_binary_operator(node: Node, ctx: RenderContext) -> Rendered:
    op = node.value("operator")
    if len(node.children) != 2:
        raise UnsupportedConstructError(
            node.kind, f"'{op}' with {len(node.children)} operands", node.address
        )
    if op not in _GO_PREC and op != "=":
        raise UnsupportedConstructError(node.kind, f"binary operator '{op}'", node.address)

    if op == "=":
        require_statement(node, ctx, "assignment")

    prec = _GO_PREC.get(op, 0)
    left, lt = _operand(node.children[0], ctx, prec, right=False)
    right, rt = _operand(node.children[1], ctx, prec, right=True)

    if op == "=":
        return f"{left} = {cast(ctx, right, rt, lt)}", lt

    if op in LOGICAL_OPS:
        left = cast(ctx, left, lt, "bool")
        right = cast(ctx, right, rt, "bool")
        return f"{left} {op} {right}", "bool"

    if op in SHIFT_OPS:
        return f"{left} {op} {right}", lt

    if left != "nil" and right != "nil":
        common = promote(lt, rt)
        left = cast(ctx, left, lt, common)
        right = cast(ctx, right, rt, common)
    else:
        common = lt

    if op in COMPARISON_OPS:
        return f"{left} {op} {right}", "bool"
    return f"{left} {op} {right}", common


def render_compound_assign_operator(node: Node, ctx: RenderContext) -> Rendered:
    op = node.value("operator")
    if op not in COMPOUND_ASSIGN_OPS or len(node.children) != 2:
        raise UnsupportedConstructError(node.kind, f"compound assignment '{op}'", node.address)
    require_statement(node, ctx, f"'{op}'")

    left, lt = node.children[0].render(ctx)
    right, rt = node.children[1].render(ctx)
    if op not in ("<<=", ">>="):
        right = cast(ctx, right, rt, lt)
    return f"{left} {op} {right}", lt


def render_unary_operator(node: Node, ctx: RenderContext) -> Rendered:
    op = node.value("operator")
    if op in ("++", "--"):
        require_statement(node, ctx, f"'{op}'")

    text, t = only_child(node).render(ctx)
    if op in ("++", "--"):
        return f"{text}{op}", t
    if op == "!":
        return negate(cast(ctx, text, t, "bool")), "bool"
    if op == "~":
        return f"^{wrap(text)}", t
    if op in ("-", "+"):
        return f"{op}{wrap(text)}", t
    if op in ("*", "&"):
        return f"{op}{wrap(text)}", node.value("type")

    raise UnsupportedConstructError(node.kind, f"unary operator '{op}'", node.address)


def render_conditional_operator(node: Node, ctx: RenderContext) -> Rendered:
    if len(node.children) != 3:
        raise UnsupportedConstructError(node.kind, "expected three operands", node.address)

    t = node.value("type")
    cond, ct = node.children[0].render(ctx)
    a, at = node.children[1].render(ctx)
    b, bt = node.children[2].render(ctx)
    cond = cast(ctx, cond, ct, "bool")

    go_type = resolve_type(ctx, t)
    if not go_type:
        return f"func() {{ if {cond} {{ {a} }} else {{ {b} }} }}()", t

    a = cast(ctx, a, at, t)
    b = cast(ctx, b, bt, t)
    return f"func() {go_type} {{ if {cond} {{ return {a} }}; return {b} }}()", t


def render_call_expr(node: Node, ctx: RenderContext) -> Rendered:
    if not node.children:
        raise UnsupportedConstructError(node.kind, "call without callee", node.address)

    callee = node.children[0]
    name, _ = callee.render(ctx)

    fd = ctx.functions.get(name)
    if fd is not None:
        arg_types = fd.argument_types
        return_type = fd.return_type
        if fd.substitution:
            name = ctx.import_type(fd.substitution)
    else:
        _, arg_types, _ = function_signature(strip_casts(callee).value("type"))
        return_type = node.value("type")

    args: List[str] = []
    for i, arg in enumerate(node.children[1:]):
        text, t = arg.render(ctx)
        if i < len(arg_types):
            text = cast(ctx, text, t, arg_types[i])
        args.append(text)

    return f"{name}({', '.join(args)})", return_type


def render_array_subscript_expr(node: Node, ctx: RenderContext) -> Rendered:
    if len(node.children) != 2:
        raise UnsupportedConstructError(node.kind, "expected base and index", node.address)

    base = node.children[0]
    if base.kind == "ImplicitCastExpr" and base.value("cast") == "ArrayToPointerDecay":
        base = only_child(base)
    base_text, _ = base.render(ctx)
    index, _ = node.children[1].render(ctx)
    return f"{base_text}[{index}]", node.value("type")


def render_member_expr(node: Node, ctx: RenderContext) -> Rendered:
    base, _ = only_child(node).render(ctx)
    name = node.value("name")
    if not name:
        raise UnsupportedConstructError(node.kind, "anonymous member access", node.address)
    return f"{base}.{go_identifier(name)}", node.value("type")


def render_predefined_expr(node: Node, ctx: RenderContext) -> Rendered:
    return f'"{ctx.function_name}"', "char *"
