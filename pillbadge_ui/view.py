from __future__ import annotations

from dataclasses import InitVar, dataclass, field, replace
import logging

from .draw_plan import DrawPlan
from .geometry import Rect, Size
from .renderer import BadgeRenderer
from .style import BadgeStyle
from .surface import DrawingSurface


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeState:
    """Value a badge shows and the style it is drawn with."""

    value: int = 0
    style: BadgeStyle = field(default_factory=BadgeStyle)

    @property
    def hidden(self) -> bool:
        return self.style.hide_when_zero and self.value == 0


@dataclass
class BadgeView:
    """Explicit-state badge adapter.

    - `set_value` / `set_style` replace the state snapshot and return True
      when a redraw is needed.
    - `display_size` is re-measured on every replacement that can change it.
      The frame keeps its origin and is resized to match.
    - Hidden badges draw nothing.
    """

    renderer: BadgeRenderer
    frame: Rect = field(default_factory=lambda: Rect(0.0, 0.0, 0.0, 0.0))
    initial_state: InitVar[BadgeState | None] = None
    needs_display: bool = field(default=True, init=False)
    _state: BadgeState = field(default_factory=BadgeState, init=False, repr=False)
    _display_size: Size = field(default_factory=lambda: Size(0.0, 0.0), init=False, repr=False)

    def __post_init__(self, initial_state: BadgeState | None) -> None:
        if initial_state is not None:
            self._state = initial_state
        self._remeasure()

    @property
    def state(self) -> BadgeState:
        return self._state

    @property
    def value(self) -> int:
        return self._state.value

    @property
    def style(self) -> BadgeStyle:
        return self._state.style

    @property
    def hidden(self) -> bool:
        return self._state.hidden

    @property
    def display_size(self) -> Size:
        return self._display_size

    def set_value(self, value: int) -> bool:
        if value == self._state.value:
            return False
        LOGGER.debug("badge value %d -> %d", self._state.value, value)
        self._state = replace(self._state, value=value)
        self._remeasure()
        self.needs_display = True
        return True

    def set_style(self, style: BadgeStyle) -> bool:
        if style == self._state.style:
            return False
        remeasure = self._state.style.affects_measurement(style)
        self._state = replace(self._state, style=style)
        if remeasure:
            self._remeasure()
        self.needs_display = True
        return True

    def size_that_fits(self, _proposed: Size | None = None) -> Size:
        return self._display_size

    def draw(self, surface: DrawingSurface) -> DrawPlan | None:
        self.needs_display = False
        if self.hidden:
            return None
        bounds = Rect(0.0, 0.0, self.frame.width, self.frame.height)
        return self.renderer.draw(surface, bounds, self._state.value, self._state.style)

    def _remeasure(self) -> None:
        size = self.renderer.measure(self._state.value, self._state.style)
        self._display_size = size
        self.frame = Rect(self.frame.x, self.frame.y, size.width, size.height)
