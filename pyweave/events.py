# pyweave/events.py

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class TouchEvent:
    """Details for a touch on a headless view."""
    action: str = "down"  # down | move | up | cancel
    x: float = 0.0
    y: float = 0.0


@dataclass
class KeyEvent:
    """Details for a key press delivered to a view."""
    key_code: int
    action: str = "down"  # down | up


@dataclass
class ContextMenu:
    """Menu handed to ``on-create-context-menu`` listeners to fill in."""
    items: List[str] = field(default_factory=list)

    def add(self, title: str) -> None:
        self.items.append(title)


@dataclass
class MenuItem:
    """A menu entry a search view can be attached to as an action view."""
    title: str
    action_view: Optional[Any] = None
