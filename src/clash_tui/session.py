"""
Session state for the clashtui dashboard.

A single SessionState instance holds everything the dashboard displays. It is
owned by the UI thread; the only data arriving from other threads comes
through the traffic channel and is applied here by the refresh controller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .constants import INITIAL_MODE, INITIAL_STATUS
from .models import (
    Connection, ConnectionsSnapshot, ProxyGroup, ProxyInfo, ProxyOption, Rule, ThroughputSample
)


class Tab(Enum):
    PROXIES = "Proxies"
    RULES = "Rules"
    CONNECTIONS = "Connections"


class Focus(Enum):
    GROUPS = "Groups"
    MEMBERS = "Members"


TAB_ORDER: List[Tab] = [Tab.PROXIES, Tab.RULES, Tab.CONNECTIONS]


def revalidate_cursor(cursor: Optional[int], length: int) -> Optional[int]:
    """Bring a cursor back in range after its list changed."""
    if length == 0:
        return None
    if cursor is None:
        return 0
    return max(0, min(cursor, length - 1))


def step_cursor(cursor: Optional[int], length: int, delta: int) -> Optional[int]:
    """Move a cursor by ``delta``, clamping at both ends."""
    if length == 0:
        return None
    current = cursor if cursor is not None else 0
    return max(0, min(current + delta, length - 1))


def sort_connections(connections: List[Connection]) -> List[Connection]:
    """Most recent first; connections with unparseable start times go last."""
    dated = [c for c in connections if c.started_at is not None]
    undated = [c for c in connections if c.started_at is None]
    dated.sort(key=lambda c: c.started_at, reverse=True)
    return dated + undated


@dataclass
class SessionState:
    """Everything the dashboard shows, plus the cursors into it."""

    tab: Tab = Tab.PROXIES
    focus: Focus = Focus.GROUPS
    mode: str = INITIAL_MODE
    overlay_visible: bool = False
    status: str = INITIAL_STATUS
    traffic: ThroughputSample = field(default_factory=ThroughputSample)

    # Latest /proxies snapshot, used to derive the member list
    proxies: Dict[str, ProxyInfo] = field(default_factory=dict)
    groups: List[ProxyGroup] = field(default_factory=list)
    members: List[ProxyOption] = field(default_factory=list)
    rules: List[Rule] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    upload_total: int = 0
    download_total: int = 0

    group_cursor: Optional[int] = None
    member_cursor: Optional[int] = None
    rule_cursor: Optional[int] = None
    connection_cursor: Optional[int] = None

    # ------------------------------------------------------------------
    # Selection helpers
    # ------------------------------------------------------------------

    @property
    def current_group(self) -> Optional[ProxyGroup]:
        if self.group_cursor is None:
            return None
        return self.groups[self.group_cursor]

    @property
    def selected_group_name(self) -> Optional[str]:
        group = self.current_group
        return group.name if group else None

    @property
    def selected_member(self) -> Optional[ProxyOption]:
        if self.member_cursor is None:
            return None
        return self.members[self.member_cursor]

    @property
    def members_focused(self) -> bool:
        """True when select/test actions apply."""
        return self.tab is Tab.PROXIES and self.focus is Focus.MEMBERS

    # ------------------------------------------------------------------
    # Snapshot merging
    # ------------------------------------------------------------------

    def apply_proxies(self, proxies: Dict[str, ProxyInfo]) -> None:
        """Replace the proxies snapshot and rebuild groups and members."""
        self.proxies = proxies
        self.groups = sorted(
            (ProxyGroup.from_info(info) for info in proxies.values() if info.is_group),
            key=lambda group: group.name,
        )
        self.group_cursor = revalidate_cursor(self.group_cursor, len(self.groups))
        self.derive_members()

    def derive_members(self) -> None:
        """Rebuild the member list for the group under the cursor."""
        group = self.current_group
        if group is None:
            self.members = []
        else:
            self.members = [
                ProxyOption(name=name, latency=self._latency_of(name))
                for name in group.members
            ]
        self.member_cursor = revalidate_cursor(self.member_cursor, len(self.members))

    def _latency_of(self, name: str) -> Optional[int]:
        info = self.proxies.get(name)
        return info.last_delay if info else None

    def apply_rules(self, rules: List[Rule]) -> None:
        self.rules = list(rules)
        self.rule_cursor = revalidate_cursor(self.rule_cursor, len(self.rules))

    def apply_connections(self, snapshot: ConnectionsSnapshot) -> None:
        self.connections = sort_connections(snapshot.connections)
        self.upload_total = snapshot.upload_total
        self.download_total = snapshot.download_total
        self.connection_cursor = revalidate_cursor(self.connection_cursor, len(self.connections))

    def apply_traffic(self, sample: ThroughputSample) -> None:
        self.traffic = sample

    def set_member_latency(self, index: int, latency: Optional[int]) -> None:
        """Update one member's latency in place."""
        if 0 <= index < len(self.members):
            self.members[index].latency = latency

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def move_selection_up(self) -> bool:
        """Move the active cursor up. Returns True if the group changed."""
        return self._move_selection(-1)

    def move_selection_down(self) -> bool:
        """Move the active cursor down. Returns True if the group changed."""
        return self._move_selection(1)

    def _move_selection(self, delta: int) -> bool:
        if self.tab is Tab.PROXIES:
            if self.focus is Focus.GROUPS:
                new_cursor = step_cursor(self.group_cursor, len(self.groups), delta)
                if new_cursor == self.group_cursor:
                    return False
                self.group_cursor = new_cursor
                # A different group's members must not stay on screen
                self.member_cursor = None
                self.derive_members()
                return True
            self.member_cursor = step_cursor(self.member_cursor, len(self.members), delta)
        elif self.tab is Tab.RULES:
            self.rule_cursor = step_cursor(self.rule_cursor, len(self.rules), delta)
        else:
            self.connection_cursor = step_cursor(self.connection_cursor, len(self.connections), delta)
        return False

    def switch_tab(self, forward: bool = True) -> Tab:
        """Cycle Proxies → Rules → Connections (or the reverse)."""
        index = TAB_ORDER.index(self.tab)
        self.tab = TAB_ORDER[(index + (1 if forward else -1)) % len(TAB_ORDER)]
        return self.tab

    def select_tab(self, tab: Tab) -> None:
        self.tab = tab

    def toggle_focus(self) -> None:
        if self.tab is not Tab.PROXIES:
            return
        self.focus = Focus.MEMBERS if self.focus is Focus.GROUPS else Focus.GROUPS

    def toggle_overlay(self) -> None:
        self.overlay_visible = not self.overlay_visible

    def focus_groups(self) -> None:
        self.focus = Focus.GROUPS

    def focus_members(self) -> None:
        self.focus = Focus.MEMBERS
