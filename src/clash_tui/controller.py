"""
Refresh controller: keeps the session state in step with the daemon.

Every daemon call made on behalf of the UI goes through here. Failures never
escape: they are logged, reported on the status line, and the previously
displayed data is left in place.
"""

from typing import Dict, Optional

from src.clash_client.client import ClashClient
from src.clash_client.exceptions import ClashError
from src.utils.logger import get_logger
from config.settings import settings

from .constants import MODE_CYCLE
from .models import ConnectionsSnapshot, DaemonConfig, ProxyInfo, Rule, ThroughputSample
from .session import SessionState, Tab
from .traffic import LatestValueChannel
from .utils import format_bytes

logger = get_logger(__name__)

# Transport errors plus the shapes a malformed payload fails with
FETCH_ERRORS = (ClashError, ValueError, TypeError, AttributeError)


def next_mode(mode: Optional[str]) -> str:
    """Next routing mode in the Rule → Global → Direct cycle.

    Matching is case-insensitive; anything outside the cycle counts as Rule.
    """
    positions = {name.lower(): index for index, name in enumerate(MODE_CYCLE)}
    index = positions.get((mode or '').lower(), 0)
    return MODE_CYCLE[(index + 1) % len(MODE_CYCLE)]


class RefreshController:
    """Pulls daemon snapshots into the session state and runs daemon actions."""

    def __init__(self, client: ClashClient, state: SessionState,
                 channel: LatestValueChannel, delay_test_url: str = None,
                 delay_test_timeout: int = None):
        self.client = client
        self.state = state
        self.channel = channel
        self.delay_test_url = delay_test_url or settings.get('delay_test.url')
        self.delay_test_timeout = delay_test_timeout or settings.get('delay_test.timeout_ms', 5000)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def refresh_all(self) -> bool:
        """Refresh mode, throughput and the active tab. Safe to call any time.

        Returns whether the active tab's fetch succeeded.
        """
        self._refresh_mode()
        self.drain_traffic()

        if self.state.tab is Tab.PROXIES:
            return self.refresh_proxies()
        if self.state.tab is Tab.RULES:
            return self.refresh_rules()
        return self.refresh_connections()

    def _refresh_mode(self) -> None:
        try:
            config = DaemonConfig.from_dict(self.client.get_config())
        except FETCH_ERRORS as e:
            # Mode display is best-effort; keep the last known value
            logger.warning(f"Failed to fetch config: {e}")
            return
        self.state.mode = config.mode

    def drain_traffic(self) -> bool:
        """Apply the newest queued throughput sample, if any."""
        sample: Optional[ThroughputSample] = self.channel.drain()
        if sample is None:
            return False
        self.state.apply_traffic(sample)
        return True

    def _fetch_proxies(self) -> Dict[str, ProxyInfo]:
        raw = self.client.get_proxies()
        return {
            name: ProxyInfo.from_dict(name, data)
            for name, data in raw.items()
            if isinstance(data, dict)
        }

    def refresh_proxies(self) -> bool:
        try:
            proxies = self._fetch_proxies()
        except FETCH_ERRORS as e:
            self._report_error("Error", e)
            return False

        self.state.apply_proxies(proxies)
        self.state.status = f"Loaded {len(self.state.groups)} groups"
        return True

    def refresh_members(self) -> bool:
        """Re-fetch proxies after the group cursor moved.

        The session has already re-derived members from its cached snapshot,
        so a failure here leaves a consistent (if older) member list.
        """
        try:
            proxies = self._fetch_proxies()
        except FETCH_ERRORS as e:
            self._report_error("Error", e)
            return False

        self.state.apply_proxies(proxies)
        return True

    def refresh_rules(self) -> bool:
        try:
            rules = [Rule.from_dict(r) for r in self.client.get_rules()]
        except FETCH_ERRORS as e:
            self._report_error("Error", e)
            return False

        self.state.apply_rules(rules)
        self.state.status = f"Loaded {len(self.state.rules)} rules"
        return True

    def refresh_connections(self) -> bool:
        try:
            snapshot = ConnectionsSnapshot.from_dict(self.client.get_connections())
        except FETCH_ERRORS as e:
            self._report_error("Error", e)
            return False

        self.state.apply_connections(snapshot)
        self.state.status = (
            f"Loaded {len(self.state.connections)} connections. "
            f"Up: {format_bytes(snapshot.upload_total)}, "
            f"Down: {format_bytes(snapshot.download_total)}"
        )
        return True

    # ------------------------------------------------------------------
    # Daemon actions
    # ------------------------------------------------------------------

    def select_member(self) -> bool:
        """Make the member under the cursor the active one for its group."""
        group = self.state.current_group
        member = self.state.selected_member
        if group is None or member is None:
            return False

        try:
            self.client.select_proxy(group.name, member.name)
        except FETCH_ERRORS as e:
            self._report_error("Error selecting proxy", e)
            return False

        # A failed follow-up refresh keeps its error on the status line
        if self.refresh_all():
            self.state.status = f"Selected: {group.name} -> {member.name}"
        return True

    def test_member_latency(self) -> Optional[int]:
        """Probe the member under the cursor; returns the delay or None."""
        index = self.state.member_cursor
        member = self.state.selected_member
        if member is None:
            return None

        self.state.status = f"Testing {member.name}..."
        try:
            delay = self.client.test_delay(member.name, self.delay_test_url, self.delay_test_timeout)
        except FETCH_ERRORS as e:
            self._report_error("Error testing delay", e)
            return None

        if delay > 0:
            self.state.set_member_latency(index, delay)
            self.state.status = f"{member.name}: {delay}ms"
            return delay

        self.state.set_member_latency(index, None)
        self.state.status = f"{member.name}: timeout"
        return None

    def cycle_mode(self) -> bool:
        """Advance the routing mode; local state changes only on success."""
        new_mode = next_mode(self.state.mode)
        try:
            self.client.update_mode(new_mode)
        except FETCH_ERRORS as e:
            self._report_error("Error switching mode", e)
            return False

        self.state.mode = new_mode
        self.state.status = f"Switched to {new_mode} mode"
        return True

    def _report_error(self, prefix: str, error: Exception) -> None:
        logger.warning(f"{prefix}: {error}")
        self.state.status = f"{prefix}: {error}"
