"""Reveal-on-scroll state machine for the story sections."""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from config import REVEAL_THRESHOLD

logger = logging.getLogger(__name__)


class Visibility(Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


@dataclass
class Section:
    section_id: str
    callback: Optional[Callable[[], Any]] = None
    state: Visibility = Visibility.HIDDEN
    ratio: float = 0.0


@dataclass
class ScrollController:
    """Tracks which story sections have been seen and triggers their charts.

    A section becomes VISIBLE the first time its intersection ratio rises to
    the threshold and never goes back to HIDDEN. Every upward crossing calls
    the section's callback again; renderers make that harmless. Controls are
    independent of scrolling: ``change`` always reaches the bound handler.
    """

    threshold: float = REVEAL_THRESHOLD
    sections: Dict[str, Section] = field(default_factory=dict)
    controls: Dict[str, Callable[[Any], Any]] = field(default_factory=dict)

    def register(self, section_id: str, callback: Callable[[], Any]) -> None:
        # Re-registering swaps the callback but keeps the latch.
        section = self.sections.setdefault(section_id, Section(section_id))
        section.callback = callback

    def observe(self, section_id: str, ratio: float) -> bool:
        """Report a new intersection ratio; returns True when the callback fired."""
        section = self.sections.get(section_id)
        if section is None:
            logger.debug("Ignoring visibility of unregistered section %s", section_id)
            return False
        crossed = section.ratio < self.threshold <= ratio
        section.ratio = ratio
        if not crossed:
            return False
        if section.state is Visibility.HIDDEN:
            logger.debug("Section %s revealed", section_id)
        section.state = Visibility.VISIBLE
        if section.callback is not None:
            section.callback()
        return True

    def is_revealed(self, section_id: str) -> bool:
        section = self.sections.get(section_id)
        return section is not None and section.state is Visibility.VISIBLE

    def revealed(self) -> List[str]:
        return [s.section_id for s in self.sections.values() if s.state is Visibility.VISIBLE]

    def replay(self) -> None:
        """Call the callback of every revealed section, in registration order."""
        for section in self.sections.values():
            if section.state is Visibility.VISIBLE and section.callback is not None:
                section.callback()

    def bind(self, control_id: str, handler: Callable[[Any], Any]) -> None:
        self.controls[control_id] = handler

    def change(self, control_id: str, value: Any) -> Any:
        handler = self.controls.get(control_id)
        if handler is None:
            logger.debug("No handler bound to control %s", control_id)
            return None
        return handler(value)
