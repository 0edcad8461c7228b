from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Pattern, Tuple

if TYPE_CHECKING:
    from ast2go.context import RenderContext

Rendered = Tuple[str, str]

NULL_MARKER = "<<<NULL>>>"


@dataclass(frozen=True)
class Rule:
    kind: str
    pattern: Pattern[str]
    render: Callable[["Node", "RenderContext"], Rendered]
    statement: bool = False


@dataclass
class Node:
    kind: str
    address: str
    fields: Dict[str, str]
    rule: Rule
    line: str = ""
    children: List["Node"] = field(default_factory=list)

    def add_child(self, node: "Node") -> None:
        self.children.append(node)

    def render(self, ctx: "RenderContext") -> Rendered:
        return self.rule.render(self, ctx)

    def value(self, name: str) -> str:
        return (self.fields.get(name) or "").strip()

    def flag(self, name: str) -> bool:
        return name in (self.value("tags") + " " + self.value("flags")).split()

    @property
    def statement(self) -> bool:
        return self.rule.statement

    def iter_nodes(self) -> Iterator["Node"]:
        yield self
        for ch in self.children:
            yield from ch.iter_nodes()

    def __repr__(self) -> str:
        return f"<{self.kind} {self.address} children={len(self.children)}>"
