"""Connection role state machine."""

from audiocast.schemas import ConnectionRole


class ConnectionRoleMachine:
    """State machine for the role a single connection holds.

    State flow with triggers:
    - UNSET -> HOST (register-host) | VIEWER (viewer-join while a host is present)
    - HOST -> UNSET (disconnect, or displaced by another register-host)
    - VIEWER -> UNSET (viewer-leave, disconnect, or host-left cascade)
    - VIEWER -> HOST (a listener takes over the host slot)

    A host never becomes a viewer of its own broadcast.
    """

    TRANSITIONS: dict[ConnectionRole, set[ConnectionRole]] = {
        ConnectionRole.UNSET: {ConnectionRole.HOST, ConnectionRole.VIEWER},
        ConnectionRole.HOST: {ConnectionRole.UNSET},
        ConnectionRole.VIEWER: {ConnectionRole.UNSET, ConnectionRole.HOST},
    }

    @classmethod
    def can_transition(cls, current: ConnectionRole, new: ConnectionRole) -> bool:
        """Check if a role transition is valid.

        Re-entering the current role is always allowed (repeat register-host or
        viewer-join).
        """
        if current == new:
            return True
        return new in cls.TRANSITIONS.get(current, set())

    @classmethod
    def get_valid_transitions(cls, role: ConnectionRole) -> set[ConnectionRole]:
        return cls.TRANSITIONS.get(role, set())
