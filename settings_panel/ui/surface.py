"""Layout surface contract used by the panel renderer.

The drawing toolkit lives outside this package. A host adapts its
immediate-mode layout API to ``LayoutSurface``; ``RecordingSurface`` is a
headless implementation that measures with fixed row heights and keeps a
log of every call, which is what the tests and the CLI render into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Protocol, Set, Tuple

from ..exceptions import LayoutMismatchError

ROW_HEIGHT = 21


class LayoutSurface(Protocol):
    is_repaint: bool

    @property
    def depth(self) -> int: ...

    def begin_vertical(self, style: str = "") -> None: ...

    def end_vertical(self) -> None: ...

    def begin_horizontal(self, style: str = "") -> None: ...

    def end_horizontal(self) -> None: ...

    def label(self, text: str, tooltip: Optional[str] = None, width: Optional[int] = None) -> None: ...

    def button(self, text: str, tooltip: Optional[str] = None) -> bool: ...

    def toggle(self, value: bool, text: str) -> bool: ...

    def space(self, amount: float) -> None: ...

    def last_rect_height(self) -> int: ...

    def reset_to(self, depth: int) -> None: ...


@dataclass
class _Frame:
    kind: str
    height: float = 0.0

    def add(self, child_height: float) -> None:
        if self.kind == "horizontal":
            self.height = max(self.height, child_height)
        else:
            self.height += child_height


@dataclass
class RecordingSurface:
    """Headless surface: fixed-height rows, recorded operations.

    ``clicks`` holds button texts that report a click this frame;
    ``toggles`` holds toggle texts whose value gets flipped.
    """

    is_repaint: bool = True
    row_height: int = ROW_HEIGHT
    clicks: Set[str] = field(default_factory=set)
    toggles: Set[str] = field(default_factory=set)
    ops: List[Tuple[Any, ...]] = field(default_factory=list)
    _stack: List[_Frame] = field(default_factory=lambda: [_Frame("vertical")], init=False, repr=False)
    _last_height: float = field(default=0.0, init=False, repr=False)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def content_height(self) -> float:
        return self._stack[0].height

    def _leaf(self, height: float) -> None:
        self._stack[-1].add(height)
        self._last_height = height

    def _begin(self, kind: str, style: str) -> None:
        self.ops.append((f"begin_{kind}", style))
        self._stack.append(_Frame(kind))

    def _end(self, kind: str) -> None:
        if len(self._stack) <= 1 or self._stack[-1].kind != kind:
            raise LayoutMismatchError(f"Mismatched layout group: end_{kind} without begin_{kind}")
        frame = self._stack.pop()
        self.ops.append((f"end_{kind}",))
        self._stack[-1].add(frame.height)
        self._last_height = frame.height

    def begin_vertical(self, style: str = "") -> None:
        self._begin("vertical", style)

    def end_vertical(self) -> None:
        self._end("vertical")

    def begin_horizontal(self, style: str = "") -> None:
        self._begin("horizontal", style)

    def end_horizontal(self) -> None:
        self._end("horizontal")

    def label(self, text: str, tooltip: Optional[str] = None, width: Optional[int] = None) -> None:
        self.ops.append(("label", text, tooltip))
        self._leaf(self.row_height)

    def button(self, text: str, tooltip: Optional[str] = None) -> bool:
        self.ops.append(("button", text, tooltip))
        self._leaf(self.row_height)
        return text in self.clicks

    def toggle(self, value: bool, text: str) -> bool:
        self.ops.append(("toggle", text, value))
        self._leaf(self.row_height)
        return (not value) if text in self.toggles else value

    def space(self, amount: float) -> None:
        self.ops.append(("space", amount))
        if self._stack[-1].kind == "horizontal":
            self._last_height = 0
            return
        self._leaf(amount)

    def last_rect_height(self) -> int:
        return int(self._last_height)

    def reset_to(self, depth: int) -> None:
        while len(self._stack) > max(depth, 1):
            self._stack.pop()

    def labels(self) -> List[str]:
        return [op[1] for op in self.ops if op[0] == "label"]

    def buttons(self) -> List[str]:
        return [op[1] for op in self.ops if op[0] == "button"]

    def spaces(self) -> Iterable[float]:
        return [op[1] for op in self.ops if op[0] == "space"]
