"""Headless rendering layer: surface contract, drawers, virtualized list."""

from .surface import LayoutSurface, RecordingSurface
from .drawers import DrawerRegistry
from .geometry import WindowGeometry, compute_window_geometry
from .virtual_list import (
    DrawOutcome,
    PanelEvent,
    RenderOptions,
    RenderPass,
    Viewport,
    VirtualListRenderer,
)

__all__ = [
    "LayoutSurface",
    "RecordingSurface",
    "DrawerRegistry",
    "WindowGeometry",
    "compute_window_geometry",
    "DrawOutcome",
    "PanelEvent",
    "RenderOptions",
    "RenderPass",
    "Viewport",
    "VirtualListRenderer",
]
