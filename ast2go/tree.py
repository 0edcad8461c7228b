import logging
import re
from typing import Iterable, Iterator, List, Optional, Tuple

from ast2go.errors import MalformedTreeError
from ast2go.grammar import parse_line
from ast2go.nodes import Node

logger = logging.getLogger(__name__)

RE_ANSI = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
RE_GLYPHS = re.compile(r"^[|`\- ]*")


def split_depth(raw: str) -> Tuple[int, str]:
    """Split one dump line into (depth, record).

    The root record carries no prefix. Every nesting level adds two glyph
    columns ("|-", "`-", "| " or two spaces), so depth is half the prefix.
    """
    line = RE_ANSI.sub("", raw).rstrip("\r\n")
    prefix = RE_GLYPHS.match(line).group(0)
    if len(prefix) % 2:
        raise MalformedTreeError(line, len(prefix) // 2, "odd indentation prefix")
    return len(prefix) // 2, line[len(prefix) :]


def iter_records(text: str) -> Iterator[Tuple[int, str]]:
    for raw in text.splitlines():
        if not raw.strip():
            continue
        yield split_depth(raw)


class TreeBuilder:
    def __init__(self) -> None:
        self.root: Optional[Node] = None
        # open ancestors; None marks a no-op record whose subtree is dropped
        self.stack: List[Tuple[int, Optional[Node]]] = []
        self.records = 0
        self.nodes = 0

    def feed(self, depth: int, line: str) -> None:
        self.records += 1

        if self.root is None:
            if depth != 0:
                raise MalformedTreeError(line, depth, "first record must be at depth 0")
            node = parse_line(line)
            if node is None:
                raise MalformedTreeError(line, depth, "root record is a no-op kind")
            self.root = node
            self.stack = [(0, node)]
            self.nodes += 1
            return

        if depth == 0:
            raise MalformedTreeError(line, depth, "second root record")

        while self.stack[-1][0] >= depth:
            self.stack.pop()

        parent_depth, parent = self.stack[-1]
        if depth > parent_depth + 1:
            raise MalformedTreeError(
                line, depth, f"depth jumps from {parent_depth} to {depth}"
            )

        node = parse_line(line) if parent is not None else None
        if node is not None:
            parent.add_child(node)
            self.nodes += 1
        self.stack.append((depth, node))

    def finish(self) -> Node:
        if self.root is None:
            raise MalformedTreeError("", 0, "empty dump")
        logger.debug("built tree: %d records, %d nodes", self.records, self.nodes)
        return self.root


def build(records: Iterable[Tuple[int, str]]) -> Node:
    builder = TreeBuilder()
    for depth, line in records:
        builder.feed(depth, line)
    return builder.finish()
