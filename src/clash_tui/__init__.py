"""
ClashTUI - Terminal dashboard for a Clash-compatible proxy daemon.

Uses the Textual TUI framework; all key handling goes through a single
dispatcher acting on one SessionState.
"""

from .app import ClashTuiApp, run_tui
from .controller import RefreshController, next_mode
from .dispatcher import CommandDispatcher
from .models import (
    ColorTheme,
    THEME,
    ProxyInfo,
    ProxyGroup,
    ProxyOption,
    Rule,
    Connection,
    ThroughputSample,
)
from .session import Focus, SessionState, Tab
from .traffic import LatestValueChannel, TrafficStreamConsumer

__all__ = [
    # Main app and entry point
    "ClashTuiApp",
    "run_tui",
    # Loop pieces
    "CommandDispatcher",
    "RefreshController",
    "next_mode",
    "SessionState",
    "Tab",
    "Focus",
    "LatestValueChannel",
    "TrafficStreamConsumer",
    # Models
    "ColorTheme",
    "THEME",
    "ProxyInfo",
    "ProxyGroup",
    "ProxyOption",
    "Rule",
    "Connection",
    "ThroughputSample",
]
