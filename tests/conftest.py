"""Pytest fixtures for clashtui tests."""

import pytest
import os
from pathlib import Path
from typing import Dict, Any, List
from unittest.mock import Mock


def pytest_configure(config):
    """Register custom pytest marks."""
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
    config.addinivalue_line(
        "markers", "real_controller: Tests that require a running Clash controller"
    )


def use_real_controller() -> bool:
    """Check if a real controller should be used for testing."""
    return os.getenv('CLASHTUI_TEST_REAL_CONTROLLER', '').lower() in ('true', '1', 'yes')


def pytest_collection_modifyitems(config, items):
    """Skip real_controller tests unless explicitly enabled."""
    if use_real_controller():
        return
    skip_real = pytest.mark.skip(reason="set CLASHTUI_TEST_REAL_CONTROLLER=true to run")
    for item in items:
        if "real_controller" in item.keywords:
            item.add_marker(skip_real)


# Add the project root to the Python path
import sys
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.clash_tui.models import ProxyInfo
from src.clash_tui.session import SessionState
from src.clash_tui.traffic import LatestValueChannel


@pytest.fixture
def sample_proxies() -> Dict[str, Dict[str, Any]]:
    """Fixture providing a GET /proxies payload (the inner ``proxies`` map)."""
    return {
        'Proxy': {
            'name': 'Proxy', 'type': 'Selector',
            'all': ['jp1', 'us1', 'DIRECT'], 'now': 'jp1', 'history': [],
        },
        'Auto': {
            'name': 'Auto', 'type': 'URLTest',
            'all': ['jp1', 'us1'], 'now': 'us1', 'history': [],
        },
        'Backup': {
            'name': 'Backup', 'type': 'Fallback',
            'all': ['us1'], 'now': 'us1', 'history': [],
        },
        'Balance': {
            'name': 'Balance', 'type': 'LoadBalance',
            'all': ['jp1', 'us1'], 'history': [],
        },
        'jp1': {
            'name': 'jp1', 'type': 'Shadowsocks',
            'history': [{'time': '2024-01-01T00:00:00Z', 'delay': 120},
                        {'time': '2024-01-01T00:01:00Z', 'delay': 85}],
        },
        'us1': {
            'name': 'us1', 'type': 'Vmess',
            'history': [{'time': '2024-01-01T00:00:00Z', 'delay': 0}],
        },
        'DIRECT': {'name': 'DIRECT', 'type': 'Direct', 'history': []},
        'REJECT': {'name': 'REJECT', 'type': 'Reject', 'history': []},
    }


@pytest.fixture
def sample_rules() -> List[Dict[str, Any]]:
    """Fixture providing the ``rules`` list of GET /rules."""
    return [
        {'type': 'DomainSuffix', 'payload': 'google.com', 'proxy': 'Proxy'},
        {'type': 'GeoIP', 'payload': 'CN', 'proxy': 'DIRECT'},
        {'type': 'Match', 'payload': '', 'proxy': 'Proxy'},
    ]


@pytest.fixture
def sample_connections() -> Dict[str, Any]:
    """Fixture providing a GET /connections payload."""
    return {
        'downloadTotal': 2097152,
        'uploadTotal': 1024,
        'connections': [
            {
                'id': 'older',
                'metadata': {
                    'network': 'tcp', 'type': 'HTTP',
                    'sourceIP': '192.168.1.10', 'sourcePort': '50000',
                    'destinationIP': '142.250.0.1', 'destinationPort': '443',
                    'host': 'www.google.com',
                },
                'upload': 100, 'download': 2000,
                'start': '2024-01-01T00:00:01.123456789Z',
                'chains': ['jp1', 'Proxy'],
                'rule': 'DomainSuffix',
            },
            {
                'id': 'newer',
                'metadata': {
                    'network': 'udp', 'type': 'Socks5',
                    'sourceIP': '192.168.1.11', 'sourcePort': '50001',
                    'destinationIP': '1.1.1.1', 'destinationPort': '53',
                    'host': '',
                },
                'upload': 50, 'download': 60,
                'start': '2024-01-01T00:00:02Z',
                'chains': [],
                'rule': 'Match',
            },
        ],
    }


@pytest.fixture
def mock_client(sample_proxies, sample_rules, sample_connections):
    """Fixture providing a mocked ClashClient instance."""
    mock_client = Mock()
    mock_client.controller = '127.0.0.1:9090'
    mock_client.secret = 'test_secret'
    mock_client.base_url = 'http://127.0.0.1:9090'

    mock_client.get_config.return_value = {'mode': 'Rule', 'port': 7890, 'socks-port': 7891}
    mock_client.get_proxies.return_value = sample_proxies
    mock_client.get_rules.return_value = sample_rules
    mock_client.get_connections.return_value = sample_connections
    mock_client.get_version.return_value = '1.18.0'
    mock_client.select_proxy.return_value = None
    mock_client.update_mode.return_value = None
    mock_client.test_delay.return_value = 150

    return mock_client


@pytest.fixture
def channel():
    """Fixture providing an empty traffic channel."""
    return LatestValueChannel()


@pytest.fixture
def state():
    """Fixture providing a fresh session state."""
    return SessionState()


@pytest.fixture
def loaded_state(sample_proxies):
    """Fixture providing a session state with the sample proxies applied."""
    session = SessionState()
    session.apply_proxies({
        name: ProxyInfo.from_dict(name, data) for name, data in sample_proxies.items()
    })
    return session
