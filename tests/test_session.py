"""Pytest tests for session state and navigation."""

import pytest

from src.clash_tui.models import Connection, ConnectionsSnapshot, ProxyInfo, Rule
from src.clash_tui.session import (
    Focus, SessionState, Tab, revalidate_cursor, sort_connections, step_cursor,
)


def make_rules(count):
    return [Rule(kind='DomainSuffix', payload=f'site{i}.com', proxy='Proxy') for i in range(count)]


class TestCursorHelpers:
    """Test cases for cursor validation and movement."""

    @pytest.mark.unit
    @pytest.mark.parametrize('cursor,length,expected', [
        (None, 0, None),
        (3, 0, None),
        (None, 4, 0),
        (2, 4, 2),
        (9, 4, 3),
    ])
    def test_revalidate(self, cursor, length, expected):
        assert revalidate_cursor(cursor, length) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize('cursor,length,delta,expected', [
        (0, 3, -1, 0),
        (2, 3, 1, 2),
        (1, 3, 1, 2),
        (None, 0, 1, None),
        (None, 3, 1, 1),
    ])
    def test_step(self, cursor, length, delta, expected):
        assert step_cursor(cursor, length, delta) == expected


class TestProxies:
    """Test cases for group and member derivation."""

    @pytest.mark.unit
    def test_groups_filtered_and_sorted(self, loaded_state):
        assert [g.name for g in loaded_state.groups] == ['Auto', 'Backup', 'Proxy']
        assert all(g.kind in ('Selector', 'URLTest', 'Fallback') for g in loaded_state.groups)

    @pytest.mark.unit
    def test_initial_cursors(self, loaded_state):
        assert loaded_state.group_cursor == 0
        assert loaded_state.member_cursor == 0
        assert loaded_state.selected_group_name == 'Auto'

    @pytest.mark.unit
    def test_member_latency_from_history(self, loaded_state):
        assert [(m.name, m.latency) for m in loaded_state.members] == [('jp1', 85), ('us1', None)]

    @pytest.mark.unit
    def test_group_move_rederives_members(self, loaded_state):
        loaded_state.focus_members()
        loaded_state.move_selection_down()
        assert loaded_state.member_cursor == 1

        loaded_state.focus_groups()
        changed = loaded_state.move_selection_down()

        assert changed is True
        assert loaded_state.selected_group_name == 'Backup'
        assert [m.name for m in loaded_state.members] == ['us1']
        assert loaded_state.member_cursor == 0

    @pytest.mark.unit
    def test_group_move_at_boundary(self, loaded_state):
        assert loaded_state.move_selection_up() is False
        assert loaded_state.group_cursor == 0

        loaded_state.move_selection_down()
        loaded_state.move_selection_down()
        assert loaded_state.move_selection_down() is False
        assert loaded_state.group_cursor == 2

    @pytest.mark.unit
    def test_member_move_reports_no_group_change(self, loaded_state):
        loaded_state.focus_members()
        assert loaded_state.move_selection_down() is False
        assert loaded_state.move_selection_down() is False
        assert loaded_state.member_cursor == 1

    @pytest.mark.unit
    def test_empty_snapshot(self, state):
        state.apply_proxies({})
        assert state.groups == []
        assert state.members == []
        assert state.group_cursor is None
        assert state.member_cursor is None
        assert state.current_group is None
        assert state.selected_member is None

    @pytest.mark.unit
    def test_shrinking_groups_clamps_cursor(self, loaded_state, sample_proxies):
        loaded_state.move_selection_down()
        loaded_state.move_selection_down()
        remaining = {name: data for name, data in sample_proxies.items() if name != 'Proxy'}
        loaded_state.apply_proxies({n: ProxyInfo.from_dict(n, d) for n, d in remaining.items()})
        assert loaded_state.group_cursor == 1
        assert loaded_state.selected_group_name == 'Backup'

    @pytest.mark.unit
    def test_set_member_latency(self, loaded_state):
        loaded_state.set_member_latency(1, 250)
        assert loaded_state.members[1].latency == 250
        loaded_state.set_member_latency(5, 10)
        assert [m.latency for m in loaded_state.members] == [85, 250]


class TestRulesAndConnections:
    """Test cases for the list tabs."""

    @pytest.mark.unit
    def test_empty_list_keeps_none(self, state):
        state.select_tab(Tab.RULES)
        state.move_selection_down()
        state.move_selection_up()
        assert state.rule_cursor is None

    @pytest.mark.unit
    def test_rule_cursor_clamps(self, state):
        state.select_tab(Tab.RULES)
        state.apply_rules(make_rules(5))
        for _ in range(10):
            state.move_selection_down()
        assert state.rule_cursor == 4

        state.apply_rules(make_rules(2))
        assert state.rule_cursor == 1

    @pytest.mark.unit
    def test_connections_sorted_newest_first(self, state, sample_connections):
        state.apply_connections(ConnectionsSnapshot.from_dict(sample_connections))
        assert [c.id for c in state.connections] == ['newer', 'older']
        assert state.upload_total == 1024
        assert state.download_total == 2097152
        assert state.connection_cursor == 0

    @pytest.mark.unit
    def test_undated_connections_last_in_order(self):
        def conn(conn_id, start):
            return Connection.from_dict({'id': conn_id, 'metadata': {}, 'start': start})

        ordered = sort_connections([
            conn('bad-a', 'garbage'),
            conn('one', '2024-01-01T00:00:01Z'),
            conn('bad-b', ''),
            conn('two', '2024-01-01T00:00:02Z'),
        ])
        assert [c.id for c in ordered] == ['two', 'one', 'bad-a', 'bad-b']


class TestTabsAndFocus:
    """Test cases for tab switching, focus and overlay."""

    @pytest.mark.unit
    def test_initial_state(self, state):
        assert state.tab is Tab.PROXIES
        assert state.focus is Focus.GROUPS
        assert state.mode == 'Unknown'
        assert state.status == 'Press ? for help'
        assert state.overlay_visible is False

    @pytest.mark.unit
    def test_switch_tab_is_circular(self, state):
        assert state.switch_tab() is Tab.RULES
        assert state.switch_tab() is Tab.CONNECTIONS
        assert state.switch_tab() is Tab.PROXIES
        assert state.switch_tab(forward=False) is Tab.CONNECTIONS

    @pytest.mark.unit
    def test_toggle_focus_only_on_proxies(self, state):
        state.toggle_focus()
        assert state.focus is Focus.MEMBERS
        assert state.members_focused

        state.select_tab(Tab.RULES)
        state.toggle_focus()
        assert state.focus is Focus.MEMBERS
        assert not state.members_focused

    @pytest.mark.unit
    def test_toggle_overlay(self, state):
        state.toggle_overlay()
        assert state.overlay_visible
        state.toggle_overlay()
        assert not state.overlay_visible
