import argparse
import logging
import os
import sys
import tempfile
from typing import List, Optional

from ast2go.config import Config
from ast2go.errors import FrontendError, TranslationError
from ast2go.toolchain import check_source, dump_ast, gofmt, try_set_libclang
from ast2go.translator import translate

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ast2go", description="Translate C to Go through clang's AST dump")
    ap.add_argument("input", help="input .c file, or an -ast-dump text file with --from-dump ('-' for stdin)")
    ap.add_argument("-o", "--output", default="out.go", help="output .go file")
    ap.add_argument("--from-dump", action="store_true", help="input is already clang -ast-dump output")
    ap.add_argument("--clang", default="clang", help="clang executable")
    ap.add_argument("--std", default="c17", help="C standard")
    ap.add_argument("--clang-arg", action="append", default=[], help="extra clang args (repeatable)")
    ap.add_argument("--package", default="main", help="Go package name")
    ap.add_argument("--no-check", action="store_true", help="skip the libclang diagnostics pass")
    ap.add_argument("--gofmt", nargs="?", const="gofmt", default=None, help="pipe the result through gofmt")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    g = ap.add_mutually_exclusive_group()
    g.add_argument("--char-unsigned", action="store_true", help="plain C `char` maps to byte (default)")
    g.add_argument("--char-signed", action="store_true", help="plain C `char` maps to int8")
    return ap


def read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def load_dump(args: argparse.Namespace) -> str:
    if args.from_dump:
        return read_input(args.input)

    if args.input != "-":
        if not args.no_check:
            try_set_libclang()
            check_source(args.input, args.std, args.clang_arg)
        return dump_ast(args.input, args.clang, args.std, args.clang_arg)

    tmp = tempfile.NamedTemporaryFile("w", suffix=".c", delete=False, encoding="utf-8")
    tmp.write(sys.stdin.read())
    tmp.close()
    try:
        if not args.no_check:
            try_set_libclang()
            check_source(tmp.name, args.std, args.clang_arg)
        return dump_ast(tmp.name, args.clang, args.std, args.clang_arg)
    finally:
        os.unlink(tmp.name)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = Config(package_name=args.package, char_signed=args.char_signed)

    try:
        text = translate(load_dump(args), cfg)
        if args.gofmt:
            text = gofmt(text, args.gofmt)
    except (TranslationError, FrontendError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    with open(args.output, "w", encoding="utf-8") as f:
        f.write(text)

    print(f"[ok] wrote {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
