from typing import List, Optional

from ast2go.context import RenderContext
from ast2go.errors import UnsupportedConstructError
from ast2go.functions import FunctionDef, function_signature
from ast2go.nodes import Node, Rendered
from ast2go.stmts import join_lines, render_body
from ast2go.typemap import (
    cast,
    go_identifier,
    is_known_type_name,
    normalize_c_type,
    resolve_type,
)


def render_nothing(node: Node, ctx: RenderContext) -> Rendered:
    return "", ""


def render_type_node(node: Node, ctx: RenderContext) -> Rendered:
    return "", node.value("type") or node.value("name")


def render_translation_unit(node: Node, ctx: RenderContext) -> Rendered:
    parts: List[str] = []
    for ch in node.children:
        text, _ = ch.render(ctx)
        if text:
            parts.append(text)
    return "\n\n".join(parts), ""


def render_parm_var_decl(node: Node, ctx: RenderContext) -> Rendered:
    t = node.value("type")
    name = go_identifier(node.value("name")) or "_"
    return f"{name} {resolve_type(ctx, t)}", t


def _main_prologue(params: List[Node], ctx: RenderContext) -> List[str]:
    if not params:
        return []

    args = ctx.import_type("os.Args")
    lines: List[str] = []
    names = [go_identifier(p.value("name")) for p in params[:2]]
    values = [f"len({args})", args]
    for name, value in zip(names, values):
        if name:
            lines.append(ctx.line(f"{name} := {value}"))
            lines.append(ctx.line(f"_ = {name}"))
    return lines


def render_function_decl(node: Node, ctx: RenderContext) -> Rendered:
    name = node.value("name")
    ret, arg_types, variadic = function_signature(node.value("type"))

    params = [ch for ch in node.children if ch.kind == "ParmVarDecl"]
    body = next((ch for ch in node.children if ch.kind == "CompoundStmt"), None)

    if body is not None or name not in ctx.functions:
        ctx.functions[name] = FunctionDef(name, ret, arg_types, variadic)
    if body is None:
        return "", ""
    if variadic:
        raise UnsupportedConstructError(node.kind, f"variadic definition of {name}", node.address)

    with ctx.function(name, ret):
        if name == "main":
            head = "func main() {"
        else:
            rendered = [p.render(ctx)[0] for p in params]
            go_ret = resolve_type(ctx, ret)
            head = f"func {go_identifier(name)}({', '.join(rendered)})"
            head += f" {go_ret} {{" if go_ret else " {"

        lines = [ctx.line(head)]
        with ctx.block():
            if name == "main":
                lines.extend(_main_prologue(params, ctx))
            lines.append(render_body(body, ctx))
        lines.append(ctx.line("}"))

    return join_lines(lines), ""


def _initializer(node: Node) -> Optional[Node]:
    if not (node.flag("cinit") or node.flag("callinit")) or not node.children:
        return None
    return node.children[-1]


def render_var_decl(node: Node, ctx: RenderContext) -> Rendered:
    t = node.value("type")
    if node.flag("extern"):
        return "", t

    name = go_identifier(node.value("name"))
    go_type = resolve_type(ctx, t)
    init = _initializer(node)
    if init is None:
        return f"var {name} {go_type}", t

    text, init_type = init.render(ctx)
    return f"var {name} {go_type} = {cast(ctx, text, init_type, t)}", t


def render_field_decl(node: Node, ctx: RenderContext) -> Rendered:
    t = node.value("type")
    name = go_identifier(node.value("name"))
    if not name:
        raise UnsupportedConstructError(node.kind, "unnamed field", node.address)
    return f"{name} {resolve_type(ctx, t)}", t


def render_record_decl(node: Node, ctx: RenderContext) -> Rendered:
    if node.flag("implicit") or not node.flag("definition"):
        return "", ""

    fields: List[str] = []
    with ctx.block():
        for ch in node.children:
            if ch.kind == "FieldDecl":
                fields.append(ctx.line(ch.render(ctx)[0]))

    name = node.value("name")
    if not name:
        ctx.pending_type = join_lines(["struct {", *fields, ctx.line("}")])
        return "", ""

    lines = [ctx.line(f"type {go_identifier(name)} struct {{"), *fields, ctx.line("}")]
    return join_lines(lines), ""


def render_typedef_decl(node: Node, ctx: RenderContext) -> Rendered:
    name = node.value("name")
    t = node.value("type")
    if node.flag("implicit") or is_known_type_name(name):
        return "", t

    spelled = normalize_c_type(t)
    if ctx.pending_type is not None and (
        "(unnamed" in spelled or "(anonymous" in spelled or spelled.endswith(" " + name)
    ):
        record, ctx.pending_type = ctx.pending_type, None
        return ctx.line(f"type {go_identifier(name)} {record}"), t

    go_type = resolve_type(ctx, t)
    if go_type == go_identifier(name):
        return "", t
    return ctx.line(f"type {go_identifier(name)} {go_type}"), t


def render_enum_constant_decl(node: Node, ctx: RenderContext) -> Rendered:
    return go_identifier(node.value("name")), node.value("type")


def _enum_value(node: Node, ctx: RenderContext) -> Optional[str]:
    if not node.children:
        return None
    text, _ = node.children[-1].render(ctx)
    return f"({text})" if " " in text else text


def render_enum_decl(node: Node, ctx: RenderContext) -> Rendered:
    name = node.value("name")
    constants = [ch for ch in node.children if ch.kind == "EnumConstantDecl"]

    underlying = resolve_type(ctx, node.value("type") or "int")
    lines: List[str] = []
    if name:
        lines.append(ctx.line(f"type {go_identifier(name)} {underlying}"))
    else:
        ctx.pending_type = underlying

    if constants:
        lines.append(ctx.line("const ("))
        base = ""
        offset = 0
        with ctx.block():
            for c in constants:
                explicit = _enum_value(c, ctx)
                if explicit is not None:
                    base, offset = explicit, 0
                if not base:
                    value = str(offset)
                elif offset == 0:
                    value = base
                else:
                    value = f"{base} + {offset}"
                lines.append(ctx.line(f"{c.render(ctx)[0]} = {value}"))
                offset += 1
        lines.append(ctx.line(")"))

    return join_lines(lines), ""
