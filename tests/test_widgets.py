"""Pytest tests for dashboard row rendering."""

import pytest

from src.clash_tui.constants import HELP_TEXT, KEY_HINTS, TAB_TITLES
from src.clash_tui.models import THEME, Connection, ProxyGroup, ProxyOption, Rule
from src.clash_tui.widgets import connection_row, group_row, member_row, rule_row


def span_styles(text):
    return {str(span.style) for span in text.spans}


class TestRows:
    """Test cases for the list row builders."""

    @pytest.mark.unit
    def test_group_row(self):
        assert group_row(ProxyGroup(name='Proxy', kind='Selector')).plain == ' Proxy'

    @pytest.mark.unit
    def test_active_member_marker(self):
        row = member_row(ProxyOption('jp1', 85), active='jp1')
        assert row.plain == f" ● {'jp1':<30} {'85ms':>8} "
        assert THEME.success in span_styles(row)

    @pytest.mark.unit
    def test_inactive_unknown_member(self):
        row = member_row(ProxyOption('us1', None), active='jp1')
        assert row.plain == f"   {'us1':<30} {'---':>8} "
        assert THEME.text_muted in span_styles(row)

    @pytest.mark.unit
    def test_slow_member_is_red(self):
        row = member_row(ProxyOption('far', 650), active=None)
        assert THEME.error in span_styles(row)

    @pytest.mark.unit
    def test_rule_row_layout(self):
        row = rule_row(0, Rule(kind='GeoIP', payload='CN', proxy='DIRECT'))
        assert row.plain == f"{1:>4} {'GeoIP':<15}{'CN':<40} → DIRECT"

    @pytest.mark.unit
    def test_rule_payload_truncated(self):
        row = rule_row(9, Rule(kind='DomainSuffix', payload='x' * 60, proxy='Proxy'))
        assert ('x' * 37 + '…') in row.plain
        assert ('x' * 38) not in row.plain
        assert row.plain.startswith('  10 ')

    @pytest.mark.unit
    def test_connection_row(self, sample_connections):
        row = connection_row(Connection.from_dict(sample_connections['connections'][0]))
        assert row.plain.startswith(f"{'192.168.1.10':<20} ")
        assert 'www.google.com' in row.plain
        assert 'Proxy ← jp1' in row.plain
        assert '↓1.95 KB' in row.plain
        assert '↑100 B' in row.plain

    @pytest.mark.unit
    def test_direct_connection_row(self, sample_connections):
        row = connection_row(Connection.from_dict(sample_connections['connections'][1]))
        assert '1.1.1.1' in row.plain
        assert 'DIRECT' in row.plain


class TestStaticText:

    @pytest.mark.unit
    def test_help_sections(self):
        for section in ('Navigation', 'Actions', 'General'):
            assert section in HELP_TEXT
        assert 'q/Esc' in HELP_TEXT

    @pytest.mark.unit
    def test_tabs_and_hints(self):
        assert TAB_TITLES == ['Proxies [1]', 'Rules [2]', 'Conns [3]']
        assert ('?', 'Help') in KEY_HINTS
