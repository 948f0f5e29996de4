"""
Command dispatcher: one key press in, one state transition out.

Keys use Textual's key names ("up", "escape", "question_mark", ...).
"""

from typing import Callable, Dict

from src.utils.logger import get_logger

from .controller import RefreshController
from .session import Focus, SessionState, Tab

logger = get_logger(__name__)

QUIT_KEYS = ("q", "escape")
HELP_KEY = "question_mark"
SELECT_KEY = "enter"

TAB_KEYS: Dict[str, Tab] = {
    "1": Tab.PROXIES,
    "2": Tab.RULES,
    "3": Tab.CONNECTIONS,
}


class CommandDispatcher:
    """Maps key presses onto the session state and the refresh controller."""

    def __init__(self, state: SessionState, controller: RefreshController):
        self.state = state
        self.controller = controller
        self._actions: Dict[str, Callable[[], None]] = {
            "tab": self.state.toggle_focus,
            "left": self._left,
            "h": self._left,
            "right": self._right,
            "l": self._right,
            "up": self._up,
            "k": self._up,
            "down": self._down,
            "j": self._down,
            SELECT_KEY: self._select,
            "t": self._test_latency,
            "r": self.controller.refresh_all,
            "m": self.controller.cycle_mode,
        }

    def dispatch(self, key: str) -> bool:
        """Handle a key press. Returns False when the session should end."""
        if key in QUIT_KEYS:
            if self.state.overlay_visible:
                self.state.overlay_visible = False
                return True
            return False

        if key == HELP_KEY:
            self.state.toggle_overlay()
            return True

        # The help overlay swallows everything except its own keys
        if self.state.overlay_visible:
            if key == SELECT_KEY:
                self.state.overlay_visible = False
            return True

        if key in TAB_KEYS:
            self.state.select_tab(TAB_KEYS[key])
            self.controller.refresh_all()
            return True

        action = self._actions.get(key)
        if action is not None:
            logger.debug(f"Dispatching {key} in {self.state.tab.value}/{self.state.focus.value}")
            action()
        return True

    def _left(self) -> None:
        if self.state.tab is Tab.PROXIES and self.state.focus is Focus.MEMBERS:
            self.state.focus_groups()
            return
        self.state.switch_tab(forward=False)
        self.controller.refresh_all()

    def _right(self) -> None:
        if self.state.tab is Tab.PROXIES and self.state.focus is Focus.GROUPS:
            self.state.focus_members()
            return
        self.state.switch_tab(forward=True)
        self.controller.refresh_all()

    def _up(self) -> None:
        if self.state.move_selection_up():
            self.controller.refresh_members()

    def _down(self) -> None:
        if self.state.move_selection_down():
            self.controller.refresh_members()

    def _select(self) -> None:
        if self.state.members_focused:
            self.controller.select_member()

    def _test_latency(self) -> None:
        if self.state.members_focused:
            self.controller.test_member_latency()
