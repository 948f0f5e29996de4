"""
Data models for the clashtui dashboard.

Contains the dataclasses built from controller API responses:
- ColorTheme: Centralized color theme management
- ProxyInfo: Raw proxy/group record from /proxies
- ProxyGroup: Selectable group shown in the Groups list
- ProxyOption: Group member with its last measured latency
- Rule: Routing rule row
- Connection / ConnectionMetadata: Active connection
- ConnectionsSnapshot: Connections plus cumulative totals
- ThroughputSample: Instantaneous up/down rate
- DaemonConfig: Running configuration (mode and ports)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.utils.parsers import parse_int, parse_timestamp

from .constants import GROUP_KINDS


@dataclass
class ColorTheme:
    """Centralized color theme management."""

    primary: str = "#58a6ff"
    primary_dark: str = "#388bfd"

    success: str = "#56d364"
    warning: str = "#d29922"
    error: str = "#f85149"

    background: str = "#0d1117"
    surface: str = "#161b22"
    highlight: str = "#323232"

    text: str = "#c9d1d9"
    text_dim: str = "#8b949e"
    text_muted: str = "#656d76"

    border: str = "#30363d"

    def latency_color(self, latency: Optional[int]) -> str:
        """Color for a latency value; unknown is dimmed."""
        if latency is None:
            return self.text_muted
        if latency < 200:
            return self.success
        if latency < 500:
            return self.warning
        return self.error


# Global theme instance
THEME = ColorTheme()


@dataclass
class ProxyInfo:
    """A proxy or group as reported by GET /proxies."""
    name: str
    kind: str
    members: List[str] = field(default_factory=list)
    now: Optional[str] = None
    history: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "ProxyInfo":
        return cls(
            name=data.get('name') or name,
            kind=data.get('type', ''),
            members=list(data.get('all') or []),
            now=data.get('now') or None,
            history=[parse_int(h.get('delay'), -1) for h in data.get('history') or [] if isinstance(h, dict)],
        )

    @property
    def is_group(self) -> bool:
        return self.kind in GROUP_KINDS

    @property
    def last_delay(self) -> Optional[int]:
        """Delay of the most recent history entry; failed probes count as unknown."""
        if not self.history or self.history[-1] <= 0:
            return None
        return self.history[-1]


@dataclass
class ProxyGroup:
    """Selectable proxy group."""
    name: str
    kind: str
    members: List[str] = field(default_factory=list)
    now: Optional[str] = None

    @classmethod
    def from_info(cls, info: ProxyInfo) -> "ProxyGroup":
        return cls(name=info.name, kind=info.kind, members=list(info.members), now=info.now)


@dataclass
class ProxyOption:
    """Group member with its latency in ms, None when unknown."""
    name: str
    latency: Optional[int] = None

    @property
    def latency_label(self) -> str:
        return f"{self.latency}ms" if self.latency is not None else "---"


@dataclass(frozen=True)
class Rule:
    """Routing rule row."""
    kind: str
    payload: str
    proxy: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rule":
        return cls(
            kind=data.get('type', ''),
            payload=data.get('payload', ''),
            proxy=data.get('proxy', ''),
        )


@dataclass
class ConnectionMetadata:
    """Endpoints and protocol of a connection."""
    network: str = ''
    conn_type: str = ''
    source_ip: str = ''
    source_port: str = ''
    destination_ip: str = ''
    destination_port: str = ''
    host: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionMetadata":
        return cls(
            network=data.get('network', ''),
            conn_type=data.get('type', ''),
            source_ip=data.get('sourceIP', ''),
            source_port=str(data.get('sourcePort', '')),
            destination_ip=data.get('destinationIP', ''),
            destination_port=str(data.get('destinationPort', '')),
            host=data.get('host', ''),
        )

    @property
    def target(self) -> str:
        """Host name when known, otherwise the destination IP."""
        return self.host or self.destination_ip


@dataclass
class Connection:
    """Active connection routed by the daemon."""
    id: str
    metadata: ConnectionMetadata
    rule: str = ''
    chains: List[str] = field(default_factory=list)
    upload: int = 0
    download: int = 0
    start: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Connection":
        return cls(
            id=data.get('id', ''),
            metadata=ConnectionMetadata.from_dict(data.get('metadata') or {}),
            rule=data.get('rule', ''),
            chains=list(data.get('chains') or []),
            upload=parse_int(data.get('upload')),
            download=parse_int(data.get('download')),
            start=data.get('start', ''),
        )

    @property
    def started_at(self) -> Optional[datetime]:
        return parse_timestamp(self.start)

    @property
    def chain_label(self) -> str:
        """Proxy chain innermost-first, or DIRECT when empty."""
        if not self.chains:
            return "DIRECT"
        return " ← ".join(reversed(self.chains))


@dataclass
class ConnectionsSnapshot:
    """Connections plus cumulative byte totals."""
    download_total: int = 0
    upload_total: int = 0
    connections: List[Connection] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionsSnapshot":
        return cls(
            download_total=parse_int(data.get('downloadTotal')),
            upload_total=parse_int(data.get('uploadTotal')),
            connections=[Connection.from_dict(c) for c in data.get('connections') or []],
        )


@dataclass(frozen=True)
class ThroughputSample:
    """Instantaneous upload/download rate in bytes per second."""
    up: int = 0
    down: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ThroughputSample":
        return cls(up=parse_int(data.get('up')), down=parse_int(data.get('down')))


@dataclass
class DaemonConfig:
    """Subset of the running configuration."""
    mode: str
    port: int = 0
    socks_port: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DaemonConfig":
        return cls(
            mode=str(data.get('mode', 'Unknown')),
            port=parse_int(data.get('port')),
            socks_port=parse_int(data.get('socks-port')),
        )
