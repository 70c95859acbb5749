from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from listview.utils.settings import get_preload_screens, get_scroll_inside, get_scroll_throttle_ms


class ScrollDirection(Enum):
    UNKNOWN = 0
    UP = 1
    DOWN = 2


@dataclass
class ScrollState:
    """Last processed scroll offset and the direction it was reached from."""

    position: float = 0.0
    direction: ScrollDirection = ScrollDirection.UNKNOWN


@dataclass
class ListViewConfig:
    """Windowing configuration captured when a list view is attached."""

    preload_screens: float = 6
    scroll_inside: bool = False
    throttle_ms: int = 1000
    load_more: Optional[Callable[[], None]] = None
    viewport_height: float = 0.0
    # Single-column layouts keep the visible run contiguous; the scanner
    # only skips overlap checks when this holds.
    monotonic_layout: bool = True

    @property
    def preload_distance(self) -> float:
        return float(self.preload_screens) * float(self.viewport_height)

    @classmethod
    def from_settings(cls, *, preload_screens=None, scroll_inside=None,
                      throttle_ms=None, load_more=None) -> "ListViewConfig":
        """Build a config from explicit arguments, falling back to settings."""
        return cls(
            preload_screens=get_preload_screens() if preload_screens is None else max(0.0, float(preload_screens)),
            scroll_inside=get_scroll_inside() if scroll_inside is None else bool(scroll_inside),
            throttle_ms=get_scroll_throttle_ms() if throttle_ms is None else max(0, int(throttle_ms)),
            load_more=load_more,
        )
