import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass
class FunctionDef:
    name: str
    return_type: str
    argument_types: List[str] = field(default_factory=list)
    variadic: bool = False
    substitution: str = ""


RE_PROTOTYPE = re.compile(
    r"^\s*(?P<ret>.+?)\s*\b(?P<name>[A-Za-z_]\w*)\s*\((?P<args>.*)\)\s*;?\s*$",
    re.S,
)


def split_top_level_commas(s: str) -> List[str]:
    parts: List[str] = []
    cur: List[str] = []
    depth_par = depth_sq = 0

    for ch in s:
        if ch == "(":
            depth_par += 1
        elif ch == ")":
            depth_par = max(0, depth_par - 1)
        elif ch == "[":
            depth_sq += 1
        elif ch == "]":
            depth_sq = max(0, depth_sq - 1)

        if ch == "," and depth_par == 0 and depth_sq == 0:
            part = "".join(cur).strip()
            if part:
                parts.append(part)
            cur = []
        else:
            cur.append(ch)

    last = "".join(cur).strip()
    if last:
        parts.append(last)
    return parts


def _split_params(args: str) -> Tuple[List[str], bool]:
    args = args.strip()
    if not args or args == "void":
        return [], False
    params = split_top_level_commas(args)
    if params and params[-1] == "...":
        return params[:-1], True
    return params, False


def _paren_group(s: str, start: int) -> int:
    depth = 0
    for i in range(start, len(s)):
        if s[i] == "(":
            depth += 1
        elif s[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def function_signature(c_type: str) -> Tuple[str, List[str], bool]:
    s = c_type.strip()
    ret_end = start = s.find("(")
    if start < 0:
        return s, [], False

    end = _paren_group(s, start)
    # "int (*)(int)": skip the pointer declarator group
    if end > 0 and s[start + 1 : end].strip().startswith("*"):
        start = s.find("(", end)
        end = _paren_group(s, start) if start > 0 else -1
    if end < 0:
        return s, [], False

    params, variadic = _split_params(s[start + 1 : end])
    return s[:ret_end].strip(), params, variadic


def parse_prototype(text: str, substitution: str = "") -> FunctionDef:
    m = RE_PROTOTYPE.match(text)
    if not m:
        raise ValueError(f"not a C prototype: {text!r}")

    params, variadic = _split_params(m.group("args"))
    return FunctionDef(
        name=m.group("name"),
        return_type=m.group("ret").strip(),
        argument_types=params,
        variadic=variadic,
        substitution=substitution,
    )


_LIBRARY: List[Tuple[str, str]] = [
    ("int printf(const char *, ...)", "fmt.Printf"),
    ("int puts(const char *)", "fmt.Println"),
    ("void exit(int)", "os.Exit"),
    ("double fabs(double)", "math.Abs"),
    ("double sqrt(double)", "math.Sqrt"),
    ("double pow(double, double)", "math.Pow"),
    ("double floor(double)", "math.Floor"),
    ("double ceil(double)", "math.Ceil"),
    ("double sin(double)", "math.Sin"),
    ("double cos(double)", "math.Cos"),
    ("double tan(double)", "math.Tan"),
    ("double atan2(double, double)", "math.Atan2"),
    ("double exp(double)", "math.Exp"),
    ("double log(double)", "math.Log"),
    ("double log10(double)", "math.Log10"),
    ("double fmod(double, double)", "math.Mod"),
]

BUILTIN_FUNCTIONS: Dict[str, FunctionDef] = {}
for _proto, _sub in _LIBRARY:
    _fd = parse_prototype(_proto, _sub)
    BUILTIN_FUNCTIONS[_fd.name] = _fd
