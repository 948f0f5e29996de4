"""
Main application class and entry point for the clashtui dashboard.

Contains:
- ClashTuiApp: Textual application driving the session loop
- run_tui: entry point used by the CLI
"""

from typing import List, Optional

from textual.app import App
from textual.binding import Binding

from config.settings import settings
from src.clash_client.client import ClashClient
from src.utils.logger import get_logger, suppress_console_logging

from .controller import RefreshController
from .dispatcher import CommandDispatcher
from .models import ThroughputSample
from .screens import DashboardScreen, HelpScreen
from .session import SessionState
from .styles import get_css, get_help_css
from .traffic import LatestValueChannel, TrafficStreamConsumer

logger = get_logger(__name__)

# Every key the dispatcher understands, by Textual key name
DISPATCH_KEYS: List[str] = [
    "q", "escape", "question_mark", "enter", "tab",
    "left", "h", "right", "l", "up", "k", "down", "j",
    "t", "r", "m", "1", "2", "3",
]


class ClashTuiApp(App):
    """Dashboard application. All keys go through the CommandDispatcher."""

    TITLE = "ClashTUI"
    ENABLE_COMMAND_PALETTE = False

    CSS = get_css() + get_help_css()

    # Priority bindings so focus-navigation keys (tab, escape) reach the dispatcher
    BINDINGS = [
        Binding(key, f"dispatch('{key}')", show=False, priority=True)
        for key in DISPATCH_KEYS
    ]

    def __init__(self, client: ClashClient):
        super().__init__()
        self.client = client
        self.state = SessionState()
        self.channel: LatestValueChannel[ThroughputSample] = LatestValueChannel()
        self.controller = RefreshController(client, self.state, self.channel)
        self.dispatcher = CommandDispatcher(self.state, self.controller)
        self.consumer = TrafficStreamConsumer(client, self.channel)
        self.dashboard: Optional[DashboardScreen] = None

    def on_mount(self) -> None:
        """Initial load, start the traffic stream, then show the dashboard."""
        logger.info(f"Starting dashboard against {self.client.base_url}")
        self.controller.refresh_all()
        self.consumer.start()
        self.dashboard = DashboardScreen()
        self.push_screen(self.dashboard)
        self.set_interval(settings.get('ui.poll_interval', 0.1), self._tick)

    def on_unmount(self) -> None:
        self.consumer.stop()

    def action_dispatch(self, key: str) -> None:
        if not self.dispatcher.dispatch(key):
            self.exit()
            return
        self._sync_help()
        if self._dashboard_ready():
            self.dashboard.render_state(self.state)

    def _dashboard_ready(self) -> bool:
        return self.dashboard is not None and self.dashboard.ready

    def _sync_help(self) -> None:
        showing = isinstance(self.screen, HelpScreen)
        if self.state.overlay_visible and not showing:
            self.push_screen(HelpScreen())
        elif not self.state.overlay_visible and showing:
            self.pop_screen()

    def _tick(self) -> None:
        """Pick up the newest throughput sample between key presses."""
        if self.controller.drain_traffic() and self._dashboard_ready():
            self.dashboard.render_header(self.state)


def run_tui(client: ClashClient) -> None:
    """Run the dashboard until the user quits. Logs go to file only."""
    suppress_console_logging()
    app = ClashTuiApp(client)
    try:
        app.run()
    finally:
        app.consumer.stop()
