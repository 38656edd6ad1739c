"""Text rendering for environment chains.

Two views of the same chain:

- **Display** (``str``) — for humans.  Each level is a brace block of
  ``key = value,`` lines, with the parent nested one indent deeper::

      {
        4 = f,
        parent = {
          1 = a,
        }
      }

- **Debug** (``repr``) — structural, built from ``repr`` of the keys
  and values, labelling the ``local`` mapping and the ``parent`` node.

Both renderers take the chain as a list of local mappings ordered
innermost first and build the text from the root outward in a loop,
so a deep chain never hits the recursion limit.
"""

from collections.abc import Mapping, Sequence
from typing import Any

_INDENT = "  "


def render_display(levels: Sequence[Mapping[Any, Any]]) -> str:
    """Render a chain as nested, indented brace blocks.

    Args:
        levels: Local mappings of the chain, innermost first.

    Returns:
        The human-readable rendering.

    """
    text: str | None = None
    for local in reversed(levels):
        lines = ["{"]
        lines.extend(f"{_INDENT}{k} = {v}," for k, v in local.items())
        if text is not None:
            nested = "".join(f"{_INDENT}{line}\n" for line in text.split("\n")).strip()
            lines.append(f"{_INDENT}parent = {nested}")
        lines.append("}")
        text = "\n".join(lines)
    return text if text is not None else "{\n}"


def render_debug(levels: Sequence[Mapping[Any, Any]], *, name: str = "Environment") -> str:
    """Render a chain structurally.

    A root renders as ``Name({...})``; a level with a parent renders as
    ``Name(local={...}, parent=...)``.

    Args:
        levels: Local mappings of the chain, innermost first.
        name: Type name to label each level with.

    """
    text: str | None = None
    for local in reversed(levels):
        if text is None:
            text = f"{name}({dict(local)!r})"
        else:
            text = f"{name}(local={dict(local)!r}, parent={text})"
    return text if text is not None else f"{name}({{}})"
