import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ast2go.context import RenderContext
from ast2go.errors import UnsupportedConstructError

BOOL_TO_INT = "github.com/elliotchance/c2go/noarch.BoolToInt"

_RE_QUALIFIER = re.compile(r"\b(?:const|volatile|restrict|__restrict|__restrict__)\b")
_RE_SIMPLE_DECL = re.compile(
    r"^(?P<base>[A-Za-z_][\w ]*?)\s*(?P<stars>[* ]*?)\s*(?P<arr>(?:\[\d*\]\s*)*)$"
)
_RE_ARRAY = re.compile(r"^(?P<elem>[^\[]*?)\s*\[(?P<size>\d*)\](?P<rest>.*)$")
_RE_FUNCTION_TYPE = re.compile(r"^[^(]*\(.*\)\s*(?:__attribute__.*)?$")
_RE_IDENT = re.compile(r"^[A-Za-z_]\w*$")

_CANONICAL: Dict[str, str] = {
    "_Bool": "bool",
    "signed": "int",
    "signed int": "int",
    "unsigned": "unsigned int",
    "short int": "short",
    "signed short": "short",
    "short unsigned int": "unsigned short",
    "unsigned short int": "unsigned short",
    "long int": "long",
    "signed long": "long",
    "long unsigned int": "unsigned long",
    "unsigned long int": "unsigned long",
    "long long int": "long long",
    "signed long long": "long long",
    "long long unsigned int": "unsigned long long",
    "unsigned long long int": "unsigned long long",
}

_SIMPLE_TYPES: Dict[str, str] = {
    "bool": "bool",
    "signed char": "int8",
    "unsigned char": "uint8",
    "short": "int16",
    "unsigned short": "uint16",
    "int": "int",
    "unsigned int": "uint32",
    "long": "int64",
    "unsigned long": "uint64",
    "long long": "int64",
    "unsigned long long": "uint64",
    "float": "float32",
    "double": "float64",
    "long double": "float64",
    "char *": "string",
    "void *": "interface{}",
    "void": "",
    "uintptr_t": "uintptr",
    "FILE *": "*os.File",
}

_TYPEDEF_ALIASES: Dict[str, str] = {
    "size_t": "unsigned long",
    "ssize_t": "long",
    "ptrdiff_t": "long",
    "intptr_t": "long",
    "int8_t": "signed char",
    "uint8_t": "unsigned char",
    "int16_t": "short",
    "uint16_t": "unsigned short",
    "int32_t": "int",
    "uint32_t": "unsigned int",
    "int64_t": "long",
    "uint64_t": "unsigned long",
}

GO_KEYWORDS = {
    "chan",
    "defer",
    "fallthrough",
    "func",
    "go",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "select",
    "type",
    "var",
}


def norm_ws(s: str) -> str:
    return re.sub(r"\s+", " ", s.strip())


def normalize_c_type(c_type: str) -> str:
    s = norm_ws(_RE_QUALIFIER.sub(" ", c_type or ""))
    m = _RE_SIMPLE_DECL.match(s)
    if not m:
        return s

    base = norm_ws(m.group("base"))
    base = _CANONICAL.get(base, base)
    stars = m.group("stars").replace(" ", "")
    arr = m.group("arr").replace(" ", "")
    return base + (" " + stars if stars else "") + arr


def is_function_type(c_type: str) -> bool:
    s = norm_ws(c_type or "")
    if "(unnamed" in s or "(anonymous" in s:
        return False
    return bool(_RE_FUNCTION_TYPE.match(s))


def go_identifier(name: str) -> str:
    if name in GO_KEYWORDS:
        return name + "_"
    return name


def resolve_type(ctx: RenderContext, c_type: str) -> str:
    s = normalize_c_type(c_type)

    if s == "char":
        return "int8" if ctx.cfg.char_signed else "byte"
    if s in _SIMPLE_TYPES:
        return ctx.import_type(_SIMPLE_TYPES[s])
    if s in _TYPEDEF_ALIASES:
        return resolve_type(ctx, _TYPEDEF_ALIASES[s])

    if "(unnamed" in s or "(anonymous" in s:
        return "interface{}"
    if is_function_type(s):
        return "interface{}"

    m = _RE_ARRAY.match(s)
    if m:
        return f"[{m.group('size')}]" + resolve_type(ctx, m.group("elem") + m.group("rest"))

    if s.endswith("*"):
        return "*" + resolve_type(ctx, s[:-1].strip())

    for prefix in ("struct ", "union ", "enum "):
        if s.startswith(prefix):
            return go_identifier(s[len(prefix) :].strip())

    if _RE_IDENT.match(s):
        return go_identifier(s)

    raise UnsupportedConstructError("type", f"cannot map C type {c_type!r} to Go")


@dataclass(frozen=True)
class NumericInfo:
    name: str
    is_float: bool
    rank: int
    bits: int
    unsigned: bool


_INTEGER_INFO: Dict[str, Tuple[int, int, bool]] = {
    "bool": (0, 1, True),
    "char": (1, 8, False),
    "signed char": (1, 8, False),
    "unsigned char": (1, 8, True),
    "short": (2, 16, False),
    "unsigned short": (2, 16, True),
    "int": (3, 32, False),
    "unsigned int": (3, 32, True),
    "long": (4, 64, False),
    "unsigned long": (4, 64, True),
    "long long": (5, 64, False),
    "unsigned long long": (5, 64, True),
}

_FLOAT_INFO: Dict[str, Tuple[int, int]] = {
    "float": (1, 32),
    "double": (2, 64),
    "long double": (3, 128),
}

_INT_RANK = 3


def numeric_info(c_type: str) -> Optional[NumericInfo]:
    s = normalize_c_type(c_type)
    s = _TYPEDEF_ALIASES.get(s, s)
    if s.startswith("enum "):
        s = "int"

    if s in _FLOAT_INFO:
        rank, bits = _FLOAT_INFO[s]
        return NumericInfo(s, True, rank, bits, False)
    if s in _INTEGER_INFO:
        rank, bits, unsigned = _INTEGER_INFO[s]
        return NumericInfo(s, False, rank, bits, unsigned)
    return None


def _integer_promotion(info: NumericInfo) -> NumericInfo:
    if info.rank < _INT_RANK:
        return numeric_info("int")
    return info


def promote(a: str, b: str) -> str:
    if normalize_c_type(a) == normalize_c_type(b):
        return a

    ia = numeric_info(a)
    ib = numeric_info(b)
    if ia is None or ib is None:
        # pointer arithmetic keeps the pointer operand's type
        return a if ia is None else b

    if ia.is_float or ib.is_float:
        if ia.is_float and ib.is_float:
            return a if ia.rank >= ib.rank else b
        return a if ia.is_float else b

    pa = _integer_promotion(ia)
    pb = _integer_promotion(ib)
    if pa.name == pb.name:
        return pa.name
    if pa.unsigned == pb.unsigned:
        return pa.name if pa.rank >= pb.rank else pb.name

    u, s = (pa, pb) if pa.unsigned else (pb, pa)
    if u.rank >= s.rank:
        return u.name
    if s.bits > u.bits:
        return s.name
    return "unsigned " + s.name


def cast(ctx: RenderContext, expr: str, from_type: str, to_type: str, kind: str = "") -> str:
    if not from_type or not to_type:
        return expr
    if kind == "NullToPointer":
        return "nil"
    if is_function_type(from_type) or is_function_type(to_type):
        return expr

    src = resolve_type(ctx, from_type)
    dst = resolve_type(ctx, to_type)
    if not src or not dst or src == dst:
        return expr

    if dst == "bool":
        if src.startswith("*") or src.startswith("[]") or src == "interface{}":
            return f"{expr} != nil"
        if src == "string":
            return f'{expr} != ""'
        return f"{expr} != 0"

    if src == "bool":
        expr = f"{ctx.import_type(BOOL_TO_INT)}({expr})"
        src = "int"
        if dst == src:
            return expr

    if dst == "interface{}":
        return expr
    if src == "interface{}":
        return f"{expr}.({dst})"

    if src.startswith("[") and not src.startswith("[]"):
        elem = src[src.index("]") + 1 :]
        if dst == "*" + elem:
            return f"&{expr}[0]"
        if dst == "string" and elem in ("byte", "int8", "uint8"):
            return f"string({expr}[:])"

    if dst.startswith("*"):
        return f"({dst})({expr})"
    return f"{dst}({expr})"


def is_known_type_name(name: str) -> bool:
    return name in _SIMPLE_TYPES or name in _TYPEDEF_ALIASES
