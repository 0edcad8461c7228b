from typing import Iterable, List, Optional, Tuple

from ast2go.context import RenderContext
from ast2go.errors import UnsupportedConstructError
from ast2go.exprs import negate
from ast2go.nodes import NULL_MARKER, Node, Rendered
from ast2go.typemap import cast, go_identifier, normalize_c_type

LOOP_KINDS = {"WhileStmt", "DoStmt", "ForStmt"}


def join_lines(parts: Iterable[str]) -> str:
    return "\n".join(p for p in parts if p)


def render_simple_statement(node: Node, ctx: RenderContext) -> str:
    with ctx.statement_position(node):
        text, _ = node.render(ctx)
    return text


def render_statement(node: Node, ctx: RenderContext) -> str:
    if node.statement:
        text, _ = node.render(ctx)
        return text
    text = render_simple_statement(node, ctx)
    return ctx.line(text) if text else text


def render_body(node: Optional[Node], ctx: RenderContext) -> str:
    if node is None:
        return ""
    if node.kind == "CompoundStmt":
        return join_lines(render_statement(ch, ctx) for ch in node.children)
    return render_statement(node, ctx)


def render_block(head: str, body: Optional[Node], ctx: RenderContext) -> List[str]:
    lines = [ctx.line(head)]
    with ctx.block():
        lines.append(render_body(body, ctx))
    return lines


def render_condition(node: Node, ctx: RenderContext) -> str:
    text, t = node.render(ctx)
    return cast(ctx, text, t, "bool")


def render_compound_stmt(node: Node, ctx: RenderContext) -> Rendered:
    lines = render_block("{", node, ctx)
    lines.append(ctx.line("}"))
    return join_lines(lines), ""


def render_decl_stmt(node: Node, ctx: RenderContext) -> Rendered:
    return join_lines(render_statement(ch, ctx) for ch in node.children), ""


def render_return_stmt(node: Node, ctx: RenderContext) -> Rendered:
    if not node.children:
        return ctx.line("return"), ""

    child = node.children[0]
    if ctx.function_name != "main" and normalize_c_type(ctx.return_type) == "void":
        # return f(); in a void function
        text = render_simple_statement(child, ctx)
        return join_lines([ctx.line(text) if text else "", ctx.line("return")]), ""

    text, t = child.render(ctx)
    if ctx.function_name == "main":
        exit_fn = ctx.import_type("os.Exit")
        return ctx.line(f"{exit_fn}({cast(ctx, text, t, 'int')})"), ""
    return ctx.line(f"return {cast(ctx, text, t, ctx.return_type)}"), ""


def render_break_stmt(node: Node, ctx: RenderContext) -> Rendered:
    return ctx.line("break"), ""


def render_continue_stmt(node: Node, ctx: RenderContext) -> Rendered:
    return ctx.line("continue"), ""


def _reject_condition_variable(node: Node) -> None:
    if node.flag("has_var") or node.flag("has_init"):
        raise UnsupportedConstructError(
            node.kind, "condition variables and init statements", node.address
        )


def _if_parts(node: Node) -> Tuple[Node, Optional[Node], Optional[Node]]:
    _reject_condition_variable(node)
    children = [ch for ch in node.children if ch.kind != NULL_MARKER]
    if len(children) not in (1, 2, 3):
        raise UnsupportedConstructError(
            node.kind, f"unexpected {len(children)} children", node.address
        )
    then = children[1] if len(children) > 1 else None
    other = children[2] if len(children) > 2 else None
    if node.flag("has_else") and other is None:
        raise UnsupportedConstructError(node.kind, "has_else without an else branch", node.address)
    return children[0], then, other


def render_if_stmt(node: Node, ctx: RenderContext) -> Rendered:
    cond, then, other = _if_parts(node)
    lines = render_block(f"if {render_condition(cond, ctx)} {{", then, ctx)

    while other is not None:
        if other.kind == "IfStmt":
            cond, then, other = _if_parts(other)
            lines.extend(render_block(f"}} else if {render_condition(cond, ctx)} {{", then, ctx))
        else:
            lines.extend(render_block("} else {", other, ctx))
            other = None

    lines.append(ctx.line("}"))
    return join_lines(lines), ""


def render_while_stmt(node: Node, ctx: RenderContext) -> Rendered:
    _reject_condition_variable(node)
    children = [ch for ch in node.children if ch.kind != NULL_MARKER]
    if not children:
        raise UnsupportedConstructError(node.kind, "missing condition", node.address)

    body = children[1] if len(children) > 1 else None
    lines = render_block(f"for {render_condition(children[0], ctx)} {{", body, ctx)
    lines.append(ctx.line("}"))
    return join_lines(lines), ""


def _continues(node: Node) -> bool:
    # a continue of this loop, not of a nested one
    if node.kind == "ContinueStmt":
        return True
    if node.kind in LOOP_KINDS:
        return False
    return any(_continues(ch) for ch in node.children)


def _free_name(name: str, node: Node) -> str:
    taken = {go_identifier(n.value("name")) for n in node.iter_nodes() if n.value("name")}
    while name in taken:
        name += "_"
    return name


def render_do_stmt(node: Node, ctx: RenderContext) -> Rendered:
    if not node.children:
        raise UnsupportedConstructError(node.kind, "missing condition", node.address)

    body = node.children[0] if len(node.children) > 1 else None
    cond = render_condition(node.children[-1], ctx)

    if body is not None and _continues(body):
        # continue must still test the condition
        flag = _free_name("first", node)
        head = f"for {flag} := true; {flag} || {cond}; {flag} = false {{"
        lines = render_block(head, body, ctx)
        lines.append(ctx.line("}"))
        return join_lines(lines), ""

    lines = render_block("for {", body, ctx)
    with ctx.block():
        lines.append(ctx.line(f"if {negate(cond)} {{"))
        with ctx.block():
            lines.append(ctx.line("break"))
        lines.append(ctx.line("}"))
    lines.append(ctx.line("}"))
    return join_lines(lines), ""


def _for_init(node: Node, ctx: RenderContext) -> str:
    if node.kind == NULL_MARKER:
        return ""
    if node.kind != "DeclStmt":
        return render_simple_statement(node, ctx)

    names: List[str] = []
    values: List[str] = []
    for decl in node.children:
        if decl.kind != "VarDecl" or not decl.children:
            raise UnsupportedConstructError(
                node.kind, "loop declarations need an initializer", node.address
            )
        text, t = decl.children[-1].render(ctx)
        names.append(go_identifier(decl.value("name")))
        values.append(cast(ctx, text, t, decl.value("type")))
    return f"{', '.join(names)} := {', '.join(values)}"


def render_for_stmt(node: Node, ctx: RenderContext) -> Rendered:
    if len(node.children) not in (4, 5):
        raise UnsupportedConstructError(
            node.kind, f"unexpected {len(node.children)} children", node.address
        )

    init_node, var_node, cond_node, inc_node = node.children[:4]
    body = node.children[4] if len(node.children) == 5 else None
    if var_node.kind != NULL_MARKER:
        raise UnsupportedConstructError(node.kind, "condition variables", node.address)

    init = _for_init(init_node, ctx)
    cond = "" if cond_node.kind == NULL_MARKER else render_condition(cond_node, ctx)
    inc = "" if inc_node.kind == NULL_MARKER else render_simple_statement(inc_node, ctx)

    if not init and not inc:
        head = f"for {cond} {{" if cond else "for {"
    else:
        head = f"for {init}; {cond}; {inc} {{"

    lines = render_block(head, body, ctx)
    lines.append(ctx.line("}"))
    return join_lines(lines), ""
