"""
Screen classes for the clashtui dashboard.

Contains:
- DashboardScreen: tabs, lists and status bar painted from the session state
- HelpScreen: modal key reference shown while the help overlay is on
"""

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen, Screen
from textual.widgets import Static

from .constants import HELP_TEXT
from .session import Focus, SessionState, Tab, TAB_ORDER
from .widgets import (
    HeaderBar, ListPanel, StatusBar,
    connection_row, group_row, member_row, rule_row,
)


class DashboardScreen(Screen):
    """Main screen. Holds no state of its own; everything comes from SessionState."""

    ready: bool = False

    def compose(self) -> ComposeResult:
        yield HeaderBar(id="header")
        with Container(id="body"):
            with Horizontal(id="proxies-tab"):
                yield ListPanel(" Groups ", id="groups")
                yield ListPanel(" Proxies ", id="members")
            yield ListPanel(" Rules ", id="rules")
            yield ListPanel(" Connections ", id="connections")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        self.ready = True
        self.render_state(self.app.state)

    def render_header(self, state: SessionState) -> None:
        header = self.query_one("#header", HeaderBar)
        header.update_header(TAB_ORDER.index(state.tab), state.mode, state.traffic)

    def render_state(self, state: SessionState) -> None:
        """Repaint every widget from the session state."""
        self.render_header(state)

        self.query_one("#proxies-tab").display = state.tab is Tab.PROXIES
        self.query_one("#rules").display = state.tab is Tab.RULES
        self.query_one("#connections").display = state.tab is Tab.CONNECTIONS

        if state.tab is Tab.PROXIES:
            self._render_proxies(state)
        elif state.tab is Tab.RULES:
            self.query_one("#rules", ListPanel).show_rows(
                [rule_row(index, rule) for index, rule in enumerate(state.rules)],
                state.rule_cursor,
                title=f" Rules ({len(state.rules)}) ",
            )
        else:
            self.query_one("#connections", ListPanel).show_rows(
                [connection_row(conn) for conn in state.connections],
                state.connection_cursor,
                title=f" Connections ({len(state.connections)}) ",
            )

        self.query_one("#status-bar", StatusBar).update_status(state.status)

    def _render_proxies(self, state: SessionState) -> None:
        group = state.current_group
        self.query_one("#groups", ListPanel).show_rows(
            [group_row(g) for g in state.groups],
            state.group_cursor,
            focused=state.focus is Focus.GROUPS,
        )
        self.query_one("#members", ListPanel).show_rows(
            [member_row(option, group.now if group else None) for option in state.members],
            state.member_cursor,
            focused=state.focus is Focus.MEMBERS,
            title=f" {group.name} ({group.kind}) " if group else " Proxies ",
        )


class HelpScreen(ModalScreen):
    """Key reference overlay."""

    def compose(self) -> ComposeResult:
        help_panel = Static(HELP_TEXT, id="help")
        help_panel.border_title = " Help "
        yield help_panel
