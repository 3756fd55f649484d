"""Presentational attributes for diagram node kinds and edge branches.

The node kind set is closed, so styles are resolved by an exhaustive
if/elif chain rather than a lookup registry.
"""

from enum import Enum
from typing import NamedTuple


class NodeKind(str, Enum):
    """Kinds of nodes a diagram can contain."""
    START = "start"
    END = "end"
    PROCESS = "process"
    DECISION = "decision"
    DOCUMENT = "document"
    SYSTEM = "system"


class NodeStyle(NamedTuple):
    shape: str
    fill: str
    stroke: str
    minimap_color: str


class EdgeStyle(NamedTuple):
    stroke: str
    badge_text: str | None
    badge_class: str


DEFAULT_MINIMAP_COLOR = "#94a3b8"


def node_style(kind: NodeKind | str) -> NodeStyle:
    """Return the shape and colours used to draw a node of ``kind``.

    Raises:
        ValueError: If ``kind`` is not a known node kind.
    """
    kind = NodeKind(kind)
    if kind == NodeKind.START:
        return NodeStyle("capsule", "#22c55e", "#16a34a", "#10b981")
    elif kind == NodeKind.END:
        return NodeStyle("capsule", "#ef4444", "#dc2626", "#ef4444")
    elif kind == NodeKind.PROCESS:
        return NodeStyle("rounded-rectangle", "#3b82f6", "#2563eb", "#3b82f6")
    elif kind == NodeKind.DECISION:
        return NodeStyle("diamond", "#f97316", "#ea580c", "#f59e0b")
    elif kind == NodeKind.DOCUMENT:
        return NodeStyle("folded-banner", "#10b981", "#059669", "#10b981")
    elif kind == NodeKind.SYSTEM:
        return NodeStyle("header-banner", "#a855f7", "#9333ea", "#8b5cf6")
    raise ValueError(f"Unhandled node kind: {kind!r}")


def edge_style(branch: str | None) -> EdgeStyle:
    """Return stroke and badge for an edge's branch label (``yes``/``no``/None).

    Raises:
        ValueError: If ``branch`` is neither None nor a branch label.
    """
    if branch is None:
        return EdgeStyle("#64748b", None, "bg-gray-100 text-gray-800")
    elif branch == "yes":
        return EdgeStyle("#10b981", "EVET", "bg-green-100 text-green-800")
    elif branch == "no":
        return EdgeStyle("#ef4444", "HAYIR", "bg-red-100 text-red-800")
    raise ValueError(f"Unknown branch label: {branch!r}")


def minimap_color(kind: str) -> str:
    """Minimap colour for a node kind, falling back to neutral gray."""
    try:
        return node_style(kind).minimap_color
    except ValueError:
        return DEFAULT_MINIMAP_COLOR
