"""Render small dump trees to Go."""

import pytest
from ast2go.context import RenderContext
from ast2go.errors import UnrecognizedKindError, UnsupportedConstructError
from ast2go.translator import render_unit, translate
from ast2go.tree import build, iter_records


def render(dump: str, ctx: RenderContext = None) -> str:
    text, _ = build(iter_records(dump)).render(ctx or RenderContext())
    return text


IDENTITY = """\
TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>
`-FunctionDecl 0x2 <t.c:1:1, line:3:1> line:1:5 identity 'int (int)'
  |-ParmVarDecl 0x3 <col:14, col:18> col:18 used x 'int'
  `-CompoundStmt 0x4 <col:21, line:3:1>
    `-ReturnStmt 0x5 <line:2:3, col:10>
      `-ImplicitCastExpr 0x6 <col:10> 'int' <LValueToRValue>
        `-DeclRefExpr 0x7 <col:10> 'int' lvalue ParmVar 0x3 'x' 'int'
"""

LESS = """\
TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>
`-FunctionDecl 0x2 <t.c:1:1, line:5:1> line:1:5 less 'int (int, int)'
  |-ParmVarDecl 0x3 <col:10, col:14> col:14 used a 'int'
  |-ParmVarDecl 0x4 <col:17, col:21> col:21 used b 'int'
  `-CompoundStmt 0x5 <col:24, line:5:1>
    |-IfStmt 0x6 <line:2:3, line:4:3>
    | |-BinaryOperator 0x7 <line:2:7, col:11> 'int' '<'
    | | |-ImplicitCastExpr 0x8 <col:7> 'int' <LValueToRValue>
    | | | `-DeclRefExpr 0x9 <col:7> 'int' lvalue ParmVar 0x3 'a' 'int'
    | | `-ImplicitCastExpr 0xa <col:11> 'int' <LValueToRValue>
    | |   `-DeclRefExpr 0xb <col:11> 'int' lvalue ParmVar 0x4 'b' 'int'
    | `-CompoundStmt 0xc <col:14, line:4:3>
    |   `-ReturnStmt 0xd <line:3:5, col:12>
    |     `-IntegerLiteral 0xe <col:12> 'int' 1
    `-ReturnStmt 0xf <line:5:3, col:10>
      `-IntegerLiteral 0x10 <col:10> 'int' 0
"""

COLOR = """\
TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>
`-EnumDecl 0x2 <t.c:1:1, line:1:30> line:1:6 Color
  |-EnumConstantDecl 0x3 <col:14> col:14 RED 'int'
  |-EnumConstantDecl 0x4 <col:19> col:19 GREEN 'int'
  `-EnumConstantDecl 0x5 <col:26> col:26 BLUE 'int'
"""

HELLO = """\
TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>
|-FunctionDecl 0x2 <t.c:1:1, col:31> col:5 printf 'int (const char *, ...)' extern
| `-ParmVarDecl 0x3 <col:12, col:24> col:24 'const char *'
`-FunctionDecl 0x4 <line:3:1, line:7:1> line:3:5 main 'int (void)'
  `-CompoundStmt 0x5 <col:16, line:7:1>
    |-CallExpr 0x6 <line:4:3, col:26> 'int'
    | |-ImplicitCastExpr 0x7 <col:3> 'int (*)(const char *, ...)' <FunctionToPointerDecay>
    | | `-DeclRefExpr 0x8 <col:3> 'int (const char *, ...)' Function 0x2 'printf' 'int (const char *, ...)'
    | `-ImplicitCastExpr 0x9 <col:10> 'const char *' <NoOp>
    |   `-ImplicitCastExpr 0xa <col:10> 'char *' <ArrayToPointerDecay>
    |     `-StringLiteral 0xb <col:10> 'char[15]' lvalue "hello, world\\n"
    |-CallExpr 0xc <line:5:3, col:13> 'int'
    | |-ImplicitCastExpr 0xd <col:3> 'int (*)(const char *, ...)' <FunctionToPointerDecay>
    | | `-DeclRefExpr 0xe <col:3> 'int (const char *, ...)' Function 0x2 'printf' 'int (const char *, ...)'
    | `-ImplicitCastExpr 0xf <col:10> 'const char *' <NoOp>
    |   `-ImplicitCastExpr 0x10 <col:10> 'char *' <ArrayToPointerDecay>
    |     `-StringLiteral 0x11 <col:10> 'char[4]' lvalue "bye"
    `-ReturnStmt 0x12 <line:6:3, col:10>
      `-IntegerLiteral 0x13 <col:10> 'int' 0
"""


def test_function_returning_parameter():
    assert translate(IDENTITY) == (
        "package main\n"
        "\n"
        "func identity(x int) int {\n"
        "\treturn x\n"
        "}\n"
    )


def test_if_nests_return_one_level_deeper():
    assert translate(LESS) == (
        "package main\n"
        "\n"
        "func less(a int, b int) int {\n"
        "\tif a < b {\n"
        "\t\treturn 1\n"
        "\t}\n"
        "\treturn 0\n"
        "}\n"
    )


def test_enum_constants_in_order():
    assert translate(COLOR) == (
        "package main\n"
        "\n"
        "type Color int\n"
        "const (\n"
        "\tRED = 0\n"
        "\tGREEN = 1\n"
        "\tBLUE = 2\n"
        ")\n"
    )


def test_enum_values_continue_from_explicit_initializer():
    dump = """\
EnumDecl 0x2 <t.c:1:1, line:5:1> line:1:6 Level
|-EnumConstantDecl 0x3 <line:2:5, col:11> col:5 LOW 'int'
| `-ConstantExpr 0x4 <col:11> 'int'
|   |-value: Int 5
|   `-IntegerLiteral 0x5 <col:11> 'int' 5
|-EnumConstantDecl 0x6 <line:3:5> col:5 MID 'int'
`-EnumConstantDecl 0x7 <line:4:5> col:5 HIGH 'int'
"""
    assert render(dump) == "type Level int\nconst (\n\tLOW = 5\n\tMID = 5 + 1\n\tHIGH = 5 + 2\n)"


def test_main_uses_substitutions_and_exit():
    assert translate(HELLO) == (
        "package main\n"
        "\n"
        "import (\n"
        '\t"fmt"\n'
        '\t"os"\n'
        ")\n"
        "\n"
        "func main() {\n"
        '\tfmt.Printf("hello, world\\n")\n'
        '\tfmt.Printf("bye")\n'
        "\tos.Exit(0)\n"
        "}\n"
    )


def test_main_arguments_come_from_os_args():
    dump = """\
TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>
`-FunctionDecl 0x2 <t.c:1:1, line:3:1> line:1:5 main 'int (int, char **)'
  |-ParmVarDecl 0x3 <col:10, col:14> col:14 argc 'int'
  |-ParmVarDecl 0x4 <col:20, col:27> col:27 argv 'char **'
  `-CompoundStmt 0x5 <col:33, line:3:1>
    `-ReturnStmt 0x6 <line:2:3, col:10>
      `-IntegerLiteral 0x7 <col:10> 'int' 0
"""
    assert translate(dump) == (
        "package main\n"
        "\n"
        'import "os"\n'
        "\n"
        "func main() {\n"
        "\targc := len(os.Args)\n"
        "\t_ = argc\n"
        "\targv := os.Args\n"
        "\t_ = argv\n"
        "\tos.Exit(0)\n"
        "}\n"
    )


def test_rendering_is_deterministic():
    root = build(iter_records(HELLO))
    assert render_unit(root) == render_unit(root)


def test_imports_are_not_duplicated():
    out = translate(HELLO)
    assert out.count('"fmt"') == 1
    assert out.count('"os"') == 1


def test_no_imports_without_qualified_names():
    assert "import" not in translate(LESS)


def test_integer_operand_promoted_to_floating():
    dump = """\
BinaryOperator 0x1 <col:10, col:14> 'double' '*'
|-ImplicitCastExpr 0x2 <col:10> 'int' <LValueToRValue>
| `-DeclRefExpr 0x3 <col:10> 'int' lvalue ParmVar 0x9 'n' 'int'
`-ImplicitCastExpr 0x4 <col:14> 'double' <LValueToRValue>
  `-DeclRefExpr 0x5 <col:14> 'double' lvalue ParmVar 0xa 'f' 'double'
"""
    text, t = build(iter_records(dump)).render(RenderContext())
    assert text == "float64(n) * f"
    assert t == "double"


def test_same_typed_operands_are_not_converted():
    dump = """\
BinaryOperator 0x1 <col:10, col:14> 'int' '-'
|-IntegerLiteral 0x2 <col:10> 'int' 7
`-BinaryOperator 0x3 <col:14, col:18> 'int' '+'
  |-IntegerLiteral 0x4 <col:14> 'int' 1
  `-IntegerLiteral 0x5 <col:18> 'int' 2
"""
    assert render(dump) == "7 - (1 + 2)"


def test_comparison_result_converted_to_int():
    dump = """\
DeclStmt 0x1 <line:2:3, col:18>
`-VarDecl 0x2 <col:3, col:17> col:7 b 'int' cinit
  `-BinaryOperator 0x3 <col:11, col:17> 'int' '>'
    |-ImplicitCastExpr 0x4 <col:11> 'int' <LValueToRValue>
    | `-DeclRefExpr 0x5 <col:11> 'int' lvalue Var 0x9 'x' 'int'
    `-IntegerLiteral 0x6 <col:17> 'int' 0
"""
    ctx = RenderContext()
    assert render(dump, ctx) == "var b int = noarch.BoolToInt(x > 0)"
    assert ctx.imports == ["github.com/elliotchance/c2go/noarch"]


def test_if_else_if_chain():
    dump = """\
IfStmt 0x1 <line:2:3, line:7:12> has_else
|-BinaryOperator 0x2 <line:2:7, col:12> 'int' '=='
| |-ImplicitCastExpr 0x3 <col:7> 'int' <LValueToRValue>
| | `-DeclRefExpr 0x4 <col:7> 'int' lvalue Var 0x9 'n' 'int'
| `-IntegerLiteral 0x5 <col:12> 'int' 0
|-CompoundStmt 0x6 <col:15, line:4:3>
| `-ReturnStmt 0x7 <line:3:5, col:12>
|   `-IntegerLiteral 0x8 <col:12> 'int' 1
`-IfStmt 0xa <line:4:10, line:7:12> has_else
  |-BinaryOperator 0xb <line:4:14, col:18> 'int' '<'
  | |-ImplicitCastExpr 0xc <col:14> 'int' <LValueToRValue>
  | | `-DeclRefExpr 0xd <col:14> 'int' lvalue Var 0x9 'n' 'int'
  | `-IntegerLiteral 0xe <col:18> 'int' 0
  |-ReturnStmt 0xf <line:5:5, col:13>
  | `-UnaryOperator 0x10 <col:12, col:13> 'int' prefix '-'
  |   `-IntegerLiteral 0x11 <col:13> 'int' 1
  `-ReturnStmt 0x12 <line:7:5, col:12>
    `-IntegerLiteral 0x13 <col:12> 'int' 0
"""
    assert render(dump) == (
        "if n == 0 {\n"
        "\treturn 1\n"
        "} else if n < 0 {\n"
        "\treturn -1\n"
        "} else {\n"
        "\treturn 0\n"
        "}"
    )


def test_while_with_integer_condition():
    dump = """\
WhileStmt 0x1 <line:2:3, line:4:3>
|-ImplicitCastExpr 0x2 <col:10> 'int' <LValueToRValue>
| `-DeclRefExpr 0x3 <col:10> 'int' lvalue Var 0x9 'n' 'int'
`-CompoundStmt 0x4 <col:13, line:4:3>
  `-UnaryOperator 0x5 <line:3:5, col:6> 'int' postfix '--'
    `-DeclRefExpr 0x6 <col:5> 'int' lvalue Var 0x9 'n' 'int'
"""
    assert render(dump) == "for n != 0 {\n\tn--\n}"


def test_do_while_breaks_on_negated_condition():
    dump = """\
DoStmt 0x1 <line:2:3, line:4:17>
|-CompoundStmt 0x2 <col:6, line:4:3>
| `-CompoundAssignOperator 0x3 <line:3:5, col:10> 'int' '*=' ComputeLHSTy='int' ComputeResultTy='int'
|   |-DeclRefExpr 0x4 <col:5> 'int' lvalue Var 0x9 'x' 'int'
|   `-IntegerLiteral 0x5 <col:10> 'int' 2
`-BinaryOperator 0x6 <line:4:12, col:16> 'int' '<'
  |-ImplicitCastExpr 0x7 <col:12> 'int' <LValueToRValue>
  | `-DeclRefExpr 0x8 <col:12> 'int' lvalue Var 0x9 'x' 'int'
  `-IntegerLiteral 0xa <col:16> 'int' 100
"""
    assert render(dump) == (
        "for {\n"
        "\tx *= 2\n"
        "\tif !(x < 100) {\n"
        "\t\tbreak\n"
        "\t}\n"
        "}"
    )


def test_for_without_clauses():
    dump = """\
ForStmt 0x1 <line:2:3, line:4:3>
|-<<<NULL>>>
|-<<<NULL>>>
|-<<<NULL>>>
|-<<<NULL>>>
`-CompoundStmt 0x2 <col:12, line:4:3>
  `-BreakStmt 0x3 <line:3:5>
"""
    assert render(dump) == "for {\n\tbreak\n}"


def test_character_and_floating_literals():
    dump = """\
CallExpr 0x1 <col:3, col:20> 'double'
|-ImplicitCastExpr 0x2 <col:3> 'double (*)(double, double)' <FunctionToPointerDecay>
| `-DeclRefExpr 0x3 <col:3> 'double (double, double)' Function 0x9 'pow' 'double (double, double)'
|-FloatingLiteral 0x4 <col:7> 'double' 2.500000e+00
`-ImplicitCastExpr 0x5 <col:12> 'double' <IntegralToFloating>
  `-CharacterLiteral 0x6 <col:12> 'int' 97
"""
    ctx = RenderContext()
    assert render(dump, ctx) == "math.Pow(2.5, float64('a'))"
    assert ctx.imports == ["math"]


def test_anonymous_struct_typedef():
    dump = """\
TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>
|-RecordDecl 0x10 <t.c:1:9, line:4:1> line:1:9 struct definition
| |-FieldDecl 0x11 <line:2:5, col:9> col:9 x 'int'
| `-FieldDecl 0x12 <line:3:5, col:12> col:12 y 'double'
`-TypedefDecl 0x13 <line:1:1, line:4:3> col:3 Vec 'struct (unnamed struct at t.c:1:9)':'struct (unnamed struct at t.c:1:9)'
  `-ElaboratedType 0x14 'struct (unnamed struct at t.c:1:9)' sugar
    `-RecordType 0x15 'struct (unnamed struct at t.c:1:9)'
      `-Record 0x10 ''
"""
    assert render(dump) == "type Vec struct {\n\tx int\n\ty float64\n}"


def test_unknown_kind_yields_no_output():
    dump = """\
TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>
`-FunctionDecl 0x2 <t.c:1:1, line:3:1> line:1:6 f 'void (void)'
  `-CompoundStmt 0x3 <col:15, line:3:1>
    `-GotoStmt 0x4 <line:2:3, col:8> 'done' 0x5
"""
    with pytest.raises(UnrecognizedKindError) as excinfo:
        translate(dump)
    assert excinfo.value.kind == "GotoStmt"


def test_comma_operator_is_unsupported():
    dump = """\
BinaryOperator 0x1 <col:3, col:10> 'int' ','
|-IntegerLiteral 0x2 <col:3> 'int' 1
`-IntegerLiteral 0x3 <col:10> 'int' 2
"""
    with pytest.raises(UnsupportedConstructError):
        render(dump)


def test_variadic_definition_is_unsupported():
    dump = """\
FunctionDecl 0x1 <t.c:1:1, line:1:25> line:1:5 sum 'int (int, ...)'
|-ParmVarDecl 0x2 <col:9, col:13> col:13 n 'int'
`-CompoundStmt 0x3 <col:21, col:25>
"""
    with pytest.raises(UnsupportedConstructError):
        render(dump)


@pytest.mark.parametrize(
    ("dump", "expected"),
    [
        (
            """\
IfStmt 0x1 <line:2:3, line:3:12> has_else
|-ImplicitCastExpr 0x2 <col:7> 'int' <LValueToRValue>
| `-DeclRefExpr 0x3 <col:7> 'int' lvalue Var 0x9 'x' 'int'
|-NullStmt 0x4 <col:10>
`-ReturnStmt 0x5 <line:3:5, col:12>
  `-IntegerLiteral 0x6 <col:12> 'int' 1
""",
            "if x != 0 {\n} else {\n\treturn 1\n}",
        ),
        (
            """\
IfStmt 0x1 <line:2:3, col:10>
|-ImplicitCastExpr 0x2 <col:7> 'int' <LValueToRValue>
| `-DeclRefExpr 0x3 <col:7> 'int' lvalue Var 0x9 'x' 'int'
`-NullStmt 0x4 <col:10>
""",
            "if x != 0 {\n}",
        ),
        (
            """\
WhileStmt 0x1 <line:2:3, col:15>
|-ImplicitCastExpr 0x2 <col:10> 'int' <LValueToRValue>
| `-DeclRefExpr 0x3 <col:10> 'int' lvalue Var 0x9 'n' 'int'
`-NullStmt 0x4 <col:15>
""",
            "for n != 0 {\n}",
        ),
    ],
)
def test_null_statement_keeps_its_slot(dump: str, expected: str):
    assert render(dump) == expected


def test_else_flag_without_else_branch_is_unsupported():
    dump = """\
IfStmt 0x1 <line:2:3, col:10> has_else
|-ImplicitCastExpr 0x2 <col:7> 'int' <LValueToRValue>
| `-DeclRefExpr 0x3 <col:7> 'int' lvalue Var 0x9 'x' 'int'
`-NullStmt 0x4 <col:10>
"""
    with pytest.raises(UnsupportedConstructError):
        render(dump)


@pytest.mark.parametrize(("var", "flag"), [("x", "first"), ("first", "first_")])
def test_do_while_with_continue_tests_condition(var: str, flag: str):
    dump = f"""\
DoStmt 0x1 <line:2:3, line:5:17>
|-CompoundStmt 0x2 <col:6, line:5:3>
| |-UnaryOperator 0x3 <line:3:5, col:6> 'int' postfix '++'
| | `-DeclRefExpr 0x4 <col:5> 'int' lvalue Var 0x9 '{var}' 'int'
| `-ContinueStmt 0x5 <line:4:5>
`-BinaryOperator 0x6 <line:5:12, col:16> 'int' '<'
  |-ImplicitCastExpr 0x7 <col:12> 'int' <LValueToRValue>
  | `-DeclRefExpr 0x8 <col:12> 'int' lvalue Var 0x9 '{var}' 'int'
  `-IntegerLiteral 0xa <col:16> 'int' 3
"""
    assert render(dump) == (
        f"for {flag} := true; {flag} || {var} < 3; {flag} = false {{\n"
        f"\t{var}++\n"
        "\tcontinue\n"
        "}"
    )


def test_do_while_ignores_continue_of_inner_loop():
    dump = """\
DoStmt 0x1 <line:2:3, line:4:17>
|-WhileStmt 0x2 <line:3:5, col:20>
| |-ImplicitCastExpr 0x3 <col:12> 'int' <LValueToRValue>
| | `-DeclRefExpr 0x4 <col:12> 'int' lvalue Var 0x9 'y' 'int'
| `-ContinueStmt 0x5 <col:15>
`-ImplicitCastExpr 0x6 <line:4:12> 'int' <LValueToRValue>
  `-DeclRefExpr 0x7 <col:12> 'int' lvalue Var 0xa 'x' 'int'
"""
    assert render(dump) == (
        "for {\n"
        "\tfor y != 0 {\n"
        "\t\tcontinue\n"
        "\t}\n"
        "\tif !(x != 0) {\n"
        "\t\tbreak\n"
        "\t}\n"
        "}"
    )


@pytest.mark.parametrize(
    "dump",
    [
        # return x++;
        """\
ReturnStmt 0x1 <col:3, col:11>
`-UnaryOperator 0x2 <col:10, col:11> 'int' postfix '++'
  `-DeclRefExpr 0x3 <col:10> 'int' lvalue Var 0x9 'x' 'int'
""",
        # if ((x = 2) > 1) return 1;
        """\
IfStmt 0x1 <line:2:3, line:3:12>
|-BinaryOperator 0x2 <line:2:7, col:17> 'int' '>'
| |-ParenExpr 0x3 <col:7, col:13> 'int'
| | `-BinaryOperator 0x4 <col:8, col:12> 'int' '='
| |   |-DeclRefExpr 0x5 <col:8> 'int' lvalue Var 0x9 'x' 'int'
| |   `-IntegerLiteral 0x6 <col:12> 'int' 2
| `-IntegerLiteral 0x7 <col:17> 'int' 1
`-ReturnStmt 0x8 <line:3:5, col:12>
  `-IntegerLiteral 0xa <col:12> 'int' 1
""",
        # int y = x += 2;
        """\
DeclStmt 0x1 <line:2:3, col:17>
`-VarDecl 0x2 <col:3, col:16> col:7 y 'int' cinit
  `-CompoundAssignOperator 0x3 <col:11, col:16> 'int' '+=' ComputeLHSTy='int' ComputeResultTy='int'
    |-DeclRefExpr 0x4 <col:11> 'int' lvalue Var 0x9 'x' 'int'
    `-IntegerLiteral 0x5 <col:16> 'int' 2
""",
    ],
)
def test_side_effect_used_as_value_is_unsupported(dump: str):
    with pytest.raises(UnsupportedConstructError):
        render(dump)


def test_for_clauses_may_assign():
    dump = """\
ForStmt 0x1 <line:2:3, col:30>
|-BinaryOperator 0x2 <col:8, col:12> 'int' '='
| |-DeclRefExpr 0x3 <col:8> 'int' lvalue Var 0x9 'i' 'int'
| `-IntegerLiteral 0x4 <col:12> 'int' 0
|-<<<NULL>>>
|-BinaryOperator 0x5 <col:15, col:19> 'int' '<'
| |-ImplicitCastExpr 0x6 <col:15> 'int' <LValueToRValue>
| | `-DeclRefExpr 0x7 <col:15> 'int' lvalue Var 0x9 'i' 'int'
| `-IntegerLiteral 0x8 <col:19> 'int' 3
|-CompoundAssignOperator 0xa <col:22, col:27> 'int' '+=' ComputeLHSTy='int' ComputeResultTy='int'
| |-DeclRefExpr 0xb <col:22> 'int' lvalue Var 0x9 'i' 'int'
| `-IntegerLiteral 0xc <col:27> 'int' 2
`-NullStmt 0xd <col:30>
"""
    assert render(dump) == "for i = 0; i < 3; i += 2 {\n}"


def test_void_return_of_call():
    dump = """\
TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>
|-FunctionDecl 0x2 <t.c:1:1, col:16> col:6 used done 'void (void)'
`-FunctionDecl 0x3 <line:2:1, col:36> col:6 finish 'void (void)'
  `-CompoundStmt 0x4 <col:20, col:36>
    `-ReturnStmt 0x5 <col:22, col:34>
      `-CallExpr 0x6 <col:29, col:34> 'void'
        `-ImplicitCastExpr 0x7 <col:29> 'void (*)(void)' <FunctionToPointerDecay>
          `-DeclRefExpr 0x8 <col:29> 'void (void)' Function 0x2 'done' 'void (void)'
"""
    assert translate(dump) == (
        "package main\n"
        "\n"
        "func finish() {\n"
        "\tdone()\n"
        "\treturn\n"
        "}\n"
    )
