import logging
from typing import List, Optional

from ast2go.config import Config
from ast2go.context import RenderContext
from ast2go.nodes import Node
from ast2go.tree import build, iter_records

logger = logging.getLogger(__name__)


def render_imports(imports: List[str]) -> str:
    if not imports:
        return ""
    if len(imports) == 1:
        return f'import "{imports[0]}"'
    body = "\n".join(f'\t"{name}"' for name in imports)
    return f"import (\n{body}\n)"


def render_unit(root: Node, cfg: Optional[Config] = None) -> str:
    ctx = RenderContext(cfg)
    body, _ = root.render(ctx)
    logger.debug("rendered %s, imports: %s", root.kind, ", ".join(ctx.imports) or "none")

    parts = [f"package {ctx.cfg.package_name}"]
    imports = render_imports(ctx.imports)
    if imports:
        parts.append(imports)
    if body:
        parts.append(body)
    return "\n\n".join(parts) + "\n"


def translate(text: str, cfg: Optional[Config] = None) -> str:
    root = build(iter_records(text))
    return render_unit(root, cfg)
