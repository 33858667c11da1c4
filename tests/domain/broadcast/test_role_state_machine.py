"""Tests for ConnectionRoleMachine transitions."""

from audiocast.domain.broadcast.role_state_machine import ConnectionRoleMachine
from audiocast.schemas import ConnectionRole


class TestCanTransition:
    def test_unset_to_host_valid(self):
        assert ConnectionRoleMachine.can_transition(ConnectionRole.UNSET, ConnectionRole.HOST) is True

    def test_unset_to_viewer_valid(self):
        assert ConnectionRoleMachine.can_transition(ConnectionRole.UNSET, ConnectionRole.VIEWER) is True

    def test_host_to_unset_valid(self):
        assert ConnectionRoleMachine.can_transition(ConnectionRole.HOST, ConnectionRole.UNSET) is True

    def test_host_to_viewer_invalid(self):
        """A host never listens to its own broadcast."""
        assert ConnectionRoleMachine.can_transition(ConnectionRole.HOST, ConnectionRole.VIEWER) is False

    def test_viewer_to_host_valid(self):
        assert ConnectionRoleMachine.can_transition(ConnectionRole.VIEWER, ConnectionRole.HOST) is True

    def test_viewer_to_unset_valid(self):
        assert ConnectionRoleMachine.can_transition(ConnectionRole.VIEWER, ConnectionRole.UNSET) is True

    def test_same_role_is_allowed(self):
        for role in ConnectionRole:
            assert ConnectionRoleMachine.can_transition(role, role) is True


class TestGetValidTransitions:
    def test_unset(self):
        assert ConnectionRoleMachine.get_valid_transitions(ConnectionRole.UNSET) == {
            ConnectionRole.HOST,
            ConnectionRole.VIEWER,
        }

    def test_host(self):
        assert ConnectionRoleMachine.get_valid_transitions(ConnectionRole.HOST) == {
            ConnectionRole.UNSET
        }
