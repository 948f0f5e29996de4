"""
Custom widgets for the clashtui dashboard.

Contains:
- ListPanel: bordered list that keeps its cursor row visible
- HeaderBar: tab strip with mode and live throughput in the title
- StatusBar: status message plus key hints
- row builders turning models into rich Text lines
"""

from typing import List, Optional

from rich.text import Text
from textual.widgets import Static

from .constants import KEY_HINTS, TAB_TITLES
from .models import THEME, Connection, ProxyGroup, ProxyOption, Rule, ThroughputSample
from .utils import format_bytes, format_speed, truncate, visible_window

HIGHLIGHT_SYMBOL = "▎"


def group_row(group: ProxyGroup) -> Text:
    return Text(f" {group.name}")


def member_row(option: ProxyOption, active: Optional[str]) -> Text:
    """Member line: active marker, name, latency colored by speed."""
    is_active = option.name == active
    row = Text()
    row.append(f" {'●' if is_active else ' '} ", style=THEME.success if is_active else THEME.text)
    row.append(f"{option.name:<30} ", style=THEME.success if is_active else None)
    row.append(f"{option.latency_label:>8} ", style=THEME.latency_color(option.latency))
    return row


def rule_row(index: int, rule: Rule) -> Text:
    row = Text()
    row.append(f"{index + 1:>4} ", style=THEME.text_muted)
    row.append(f"{rule.kind:<15}", style="cyan")
    row.append(f"{truncate(rule.payload, 38):<40}", style="white")
    row.append(f" → {rule.proxy}", style="yellow")
    return row


def connection_row(conn: Connection) -> Text:
    row = Text()
    row.append(f"{conn.metadata.source_ip:<20} ", style=THEME.text_muted)
    row.append(f"{truncate(conn.metadata.target, 28):<30} ", style="white")
    row.append(f"{truncate(conn.chain_label, 28):<30} ", style="cyan")
    row.append(
        f"↓{format_bytes(conn.download):<10} ↑{format_bytes(conn.upload):<10}",
        style="yellow",
    )
    return row


class ListPanel(Static):
    """Bordered list with a highlighted cursor row."""

    def __init__(self, title: str, id: str = None, classes: str = None):
        super().__init__("", id=id, classes=classes)
        self.border_title = title
        self._rows: List[Text] = []
        self._cursor: Optional[int] = None

    def show_rows(self, rows: List[Text], cursor: Optional[int], focused: bool = False,
                  title: str = None) -> None:
        self._rows = rows
        self._cursor = cursor
        if title is not None:
            self.border_title = title
        self.set_class(focused, "focused")
        self._paint()

    def on_resize(self) -> None:
        self._paint()

    def _paint(self) -> None:
        start, end = visible_window(len(self._rows), self._cursor, self.size.height)
        text = Text()
        for index in range(start, end):
            if index == self._cursor:
                line = Text(HIGHLIGHT_SYMBOL, style=THEME.primary) + self._rows[index]
                line.stylize(f"bold on {THEME.highlight}")
            else:
                line = Text(" ") + self._rows[index]
            text.append_text(line)
            if index < end - 1:
                text.append("\n")
        self.update(text)


class HeaderBar(Static):
    """Tab strip; the border title carries mode and throughput."""

    def update_header(self, active_tab: int, mode: str, traffic: ThroughputSample) -> None:
        self.border_title = (
            f" ClashTUI - Mode: {mode} | ↑ {format_speed(traffic.up)} | ↓ {format_speed(traffic.down)} "
        )
        tabs = Text(" ")
        for index, title in enumerate(TAB_TITLES):
            if index:
                tabs.append(" │ ", style=THEME.text_muted)
            if index == active_tab:
                tabs.append(title, style="bold underline cyan")
            else:
                tabs.append(title, style=THEME.text_dim)
        self.update(tabs)


class StatusBar(Static):
    """Status message with the key hint line underneath."""

    def on_mount(self) -> None:
        self.border_title = " Status "

    def update_status(self, status: str) -> None:
        text = Text(" ")
        text.append(status, style="yellow")
        text.append("\n")
        for key, label in KEY_HINTS:
            text.append(f" {key} ", style="cyan")
            text.append(f"{label} ")
        self.update(text)
