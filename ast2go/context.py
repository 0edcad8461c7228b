import re
from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from ast2go.config import Config
from ast2go.functions import BUILTIN_FUNCTIONS, FunctionDef

if TYPE_CHECKING:
    from ast2go.nodes import Node

_RE_TYPE_PREFIX = re.compile(r"^(?:\*|\[\d*\])*")


class RenderContext:
    def __init__(self, cfg: Optional[Config] = None) -> None:
        self.cfg: Config = cfg or Config()
        self.imports: List[str] = []

        self.function_name: str = ""
        self.return_type: str = ""
        self.indent: int = 0

        self.functions: Dict[str, FunctionDef] = dict(BUILTIN_FUNCTIONS)
        self.pending_type: Optional[str] = None
        # expression node being rendered as a whole Go statement
        self.statement_node: Optional["Node"] = None

    def add_import(self, name: str) -> None:
        if name not in self.imports:
            self.imports.append(name)

    def import_type(self, name: str) -> str:
        # "*github.com/a/b.T" imports "github.com/a/b" and renders as "*b.T".
        prefix = _RE_TYPE_PREFIX.match(name).group(0)
        qualified = name[len(prefix) :]
        if "." not in qualified:
            return name

        parts = qualified.split(".")
        self.add_import(".".join(parts[:-1]))
        return prefix + qualified.split("/")[-1]

    def indentation(self) -> str:
        return self.cfg.indent_with * self.indent

    def line(self, text: str) -> str:
        return self.indentation() + text

    @contextmanager
    def block(self) -> Iterator[None]:
        self.indent += 1
        try:
            yield
        finally:
            self.indent -= 1

    @contextmanager
    def statement_position(self, node: "Node") -> Iterator[None]:
        prev = self.statement_node
        self.statement_node = node
        try:
            yield
        finally:
            self.statement_node = prev

    def in_statement_position(self, node: "Node") -> bool:
        return self.statement_node is node

    @contextmanager
    def function(self, name: str, return_type: str) -> Iterator[None]:
        prev = (self.function_name, self.return_type)
        self.function_name = name
        self.return_type = return_type
        try:
            yield
        finally:
            self.function_name, self.return_type = prev
