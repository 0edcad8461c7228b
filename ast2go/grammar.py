import re
from typing import Callable, Dict, Optional

from ast2go import decls, exprs, stmts
from ast2go.context import RenderContext
from ast2go.errors import MalformedRecordError, UnrecognizedKindError
from ast2go.nodes import NULL_MARKER, Node, Rendered, Rule

RE_ADDRESS = r"(?P<address>[0-9a-fA-Fx]+) "

# <col:5, line:7:1>, <<invalid sloc>>, <<built-in>:1:1, col:3>
_POS = r"<(?P<position>(?:[^<>]|<[^<>]*>)*)>"
_LOC = r"(?P<position2><[^<>]*>|[^\s<>]+)"
_TAGS = r"(?P<tags>(?: (?:implicit|used|referenced|invalid|hidden))*)"
_TYPE = r"'(?P<type>[^']*)'(?::'(?P<type2>[^']*)')?"
_VALUE_KIND = r"(?: (?:lvalue|xvalue|prvalue))?(?: (?:bitfield|vectorcomponent))?"
_REST = r"(?P<flags>.*)"
_PREV = r"(?:prev (?P<prev>[0-9a-fA-Fx]+) )?"

_EXPR = _POS + " " + _TYPE + _VALUE_KIND
_DECL = _PREV + _POS + " " + _LOC + _TAGS

NOOP_KINDS = {"value:"}

Render = Callable[[Node, RenderContext], Rendered]


def _rule(kind: str, pattern: str, render: Render, statement: bool = False) -> Rule:
    return Rule(kind, re.compile(RE_ADDRESS + pattern), render, statement)


def _attr(kind: str) -> Rule:
    return _rule(kind, _POS + _REST, decls.render_nothing)


def _type_node(kind: str) -> Rule:
    return _rule(kind, _TYPE + _REST, decls.render_type_node)


def _type_ref(kind: str) -> Rule:
    return _rule(kind, r"'(?P<name>[^']*)'" + _REST, decls.render_type_node)


def _stmt(kind: str, render: Render) -> Rule:
    return _rule(kind, _POS + _REST, render, statement=True)


_RULES = [
    # attributes
    _attr("AllocAlignAttr"),
    _attr("AllocSizeAttr"),
    _attr("AlwaysInlineAttr"),
    _attr("AsmLabelAttr"),
    _attr("AvailabilityAttr"),
    _attr("BuiltinAttr"),
    _attr("ColdAttr"),
    _attr("ConstAttr"),
    _attr("DeprecatedAttr"),
    _attr("FormatAttr"),
    _attr("MallocAttr"),
    _attr("ModeAttr"),
    _attr("NoInlineAttr"),
    _attr("NoThrowAttr"),
    _attr("NonNullAttr"),
    _attr("PureAttr"),
    _attr("RestrictAttr"),
    _attr("ReturnsTwiceAttr"),
    _attr("WarnUnusedResultAttr"),
    # types
    _type_node("BuiltinType"),
    _rule("ConstantArrayType", _TYPE + r" (?P<size>\d+)" + _REST, decls.render_type_node),
    _type_node("DecayedType"),
    _type_node("ElaboratedType"),
    _type_ref("Enum"),
    _type_node("EnumType"),
    _type_node("FunctionProtoType"),
    _type_node("ParenType"),
    _type_node("PointerType"),
    _type_node("QualType"),
    _type_ref("Record"),
    _type_node("RecordType"),
    _type_ref("Typedef"),
    _type_node("TypedefType"),
    # declarations
    _rule("TranslationUnitDecl", _POS + _REST, decls.render_translation_unit, statement=True),
    _rule(
        "FunctionDecl",
        _DECL + r" (?P<name>\w+) " + _TYPE + _REST,
        decls.render_function_decl,
        statement=True,
    ),
    _rule("ParmVarDecl", _DECL + r"(?: (?P<name>\w+))? " + _TYPE + _REST, decls.render_parm_var_decl),
    _rule("VarDecl", _DECL + r" (?P<name>\w+) " + _TYPE + _REST, decls.render_var_decl),
    _rule("FieldDecl", _DECL + r"(?: (?P<name>\w+))? " + _TYPE + _REST, decls.render_field_decl),
    _rule(
        "RecordDecl",
        _DECL + r" (?P<tag>struct|union)(?: (?!definition\b)(?P<name>\w+))?" + _REST,
        decls.render_record_decl,
        statement=True,
    ),
    _rule(
        "EnumDecl",
        _DECL + r"(?: (?P<name>\w+))?(?: " + _TYPE + ")?" + _REST,
        decls.render_enum_decl,
        statement=True,
    ),
    _rule("EnumConstantDecl", _DECL + r" (?P<name>\w+) " + _TYPE + _REST, decls.render_enum_constant_decl),
    _rule(
        "TypedefDecl",
        _DECL + r" (?P<name>\w+) " + _TYPE + _REST,
        decls.render_typedef_decl,
        statement=True,
    ),
    # statements
    _stmt("BreakStmt", stmts.render_break_stmt),
    _stmt("CompoundStmt", stmts.render_compound_stmt),
    _stmt("ContinueStmt", stmts.render_continue_stmt),
    _stmt("DeclStmt", stmts.render_decl_stmt),
    _stmt("DoStmt", stmts.render_do_stmt),
    _stmt("ForStmt", stmts.render_for_stmt),
    _stmt("IfStmt", stmts.render_if_stmt),
    # ";" keeps its slot in if/loop bodies and renders as nothing
    _stmt("NullStmt", decls.render_nothing),
    _stmt("ReturnStmt", stmts.render_return_stmt),
    _stmt("WhileStmt", stmts.render_while_stmt),
    # expressions
    _rule("ArraySubscriptExpr", _EXPR + _REST, exprs.render_array_subscript_expr),
    _rule("BinaryOperator", _EXPR + r" '(?P<operator>[^']*)'" + _REST, exprs.render_binary_operator),
    _rule("CallExpr", _EXPR + _REST, exprs.render_call_expr),
    _rule("CharacterLiteral", _EXPR + r" (?P<value>-?\d+)" + _REST, exprs.render_character_literal),
    _rule(
        "CompoundAssignOperator",
        _EXPR + r" '(?P<operator>[^']*)'" + _REST,
        exprs.render_compound_assign_operator,
    ),
    _rule("ConditionalOperator", _EXPR + _REST, exprs.render_conditional_operator),
    _rule("ConstantExpr", _EXPR + _REST, exprs.render_constant_expr),
    _rule("CStyleCastExpr", _EXPR + r" <(?P<cast>\w+)>" + _REST, exprs.render_cast_expr),
    _rule(
        "DeclRefExpr",
        _EXPR + r" (?P<decl_kind>\w+) (?P<decl_address>[0-9a-fA-Fx]+) '(?P<name>[^']*)' "
        r"'(?P<decl_type>[^']*)'" + _REST,
        exprs.render_decl_ref_expr,
    ),
    _rule("FloatingLiteral", _EXPR + r" (?P<value>\S+)" + _REST, exprs.render_floating_literal),
    _rule("ImplicitCastExpr", _EXPR + r" <(?P<cast>\w+)>" + _REST, exprs.render_cast_expr),
    _rule("IntegerLiteral", _EXPR + r" (?P<value>-?\d+)" + _REST, exprs.render_integer_literal),
    _rule(
        "MemberExpr",
        _EXPR + r" (?P<arrow>->|\.)(?P<name>\w*) (?P<member_address>[0-9a-fA-Fx]+)" + _REST,
        exprs.render_member_expr,
    ),
    _rule("ParenExpr", _EXPR + _REST, exprs.render_paren_expr),
    _rule("PredefinedExpr", _EXPR + r" (?P<name>\w+)" + _REST, exprs.render_predefined_expr),
    _rule("StringLiteral", _EXPR + r' (?P<value>".*")' + _REST, exprs.render_string_literal),
    _rule(
        "UnaryOperator",
        _EXPR + r" (?P<fix>prefix|postfix) '(?P<operator>[^']*)'" + _REST,
        exprs.render_unary_operator,
    ),
]

GRAMMAR: Dict[str, Rule] = {r.kind: r for r in _RULES}

NULL_RULE = Rule(NULL_MARKER, re.compile(""), decls.render_nothing)


def parse_line(line: str) -> Optional[Node]:
    line = line.rstrip("\r\n")
    kind, _, rest = line.partition(" ")

    if kind in NOOP_KINDS:
        return None
    if kind == NULL_MARKER:
        return Node(kind=NULL_MARKER, address="", fields={}, rule=NULL_RULE, line=line)

    rule = GRAMMAR.get(kind)
    if rule is None:
        raise UnrecognizedKindError(kind, line)

    m = rule.pattern.match(rest)
    if not m:
        raise MalformedRecordError(kind, line, rule.pattern.pattern)

    fields = {k: v for k, v in m.groupdict().items() if v is not None}
    address = fields.pop("address")
    return Node(kind=kind, address=address, fields=fields, rule=rule, line=line)
