import logging
import os
import subprocess
from typing import List, Optional

from clang import cindex

from ast2go.errors import FrontendError

logger = logging.getLogger(__name__)

AST_DUMP_ARGS = ["-Xclang", "-ast-dump", "-fsyntax-only", "-fno-color-diagnostics"]


def try_set_libclang() -> None:
    lib_file = os.environ.get("LIBCLANG_FILE")
    lib_path = os.environ.get("LIBCLANG_PATH")
    try:
        if lib_file and os.path.exists(lib_file):
            cindex.Config.set_library_file(lib_file)
        elif lib_path and os.path.isdir(lib_path):
            cindex.Config.set_library_path(lib_path)
    except Exception as e:
        # cindex refuses a second configuration once the library is loaded
        logger.debug("libclang location not applied: %s", e)


def _run(cmd: List[str], what: str, stdin: Optional[str] = None) -> str:
    logger.debug("running: %s", " ".join(cmd))
    try:
        p = subprocess.run(
            cmd,
            input=stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise FrontendError(f"{what}: cannot run {cmd[0]}: {e}") from e
    if p.returncode != 0:
        raise FrontendError(f"{what} failed:\n{p.stderr}")
    return p.stdout


def check_source(path: str, std: str = "c17", clang_args: Optional[List[str]] = None) -> None:
    """Parse the source with libclang and fail on error diagnostics."""
    idx = cindex.Index.create()
    try:
        tu = idx.parse(path, args=[f"-std={std}", "-x", "c"] + list(clang_args or []))
    except cindex.TranslationUnitLoadError as e:
        raise FrontendError(f"libclang could not parse {path}: {e}") from e

    errors = [
        str(d) for d in tu.diagnostics if d.severity >= cindex.Diagnostic.Error
    ]
    if errors:
        raise FrontendError("clang reported errors:\n" + "\n".join(errors))
    logger.debug("%s: %d diagnostics, none fatal", path, len(tu.diagnostics))


def dump_ast(
    path: str,
    clang: str = "clang",
    std: str = "c17",
    clang_args: Optional[List[str]] = None,
) -> str:
    cmd = [clang] + AST_DUMP_ARGS + [f"-std={std}", "-x", "c", path] + list(clang_args or [])
    return _run(cmd, "clang ast dump")


def gofmt(text: str, gofmt_bin: str = "gofmt") -> str:
    return _run([gofmt_bin], "gofmt", stdin=text)
