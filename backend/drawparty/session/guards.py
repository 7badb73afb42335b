"""Which sender role may issue each command, and in which phases."""

from dataclasses import dataclass

from drawparty.messaging.types import ClientMessageType
from drawparty.session.connections import Role
from drawparty.session.models import Phase

_ANY_PHASE = frozenset(Phase)


@dataclass(frozen=True)
class Guard:
    roles: frozenset[Role]
    phases: frozenset[Phase] = _ANY_PHASE

    def allows(self, role: Role, phase: Phase) -> bool:
        return role in self.roles and phase in self.phases


_HOST = frozenset({Role.HOST})
_PLAYER = frozenset({Role.PLAYER})

GUARDS: dict[ClientMessageType, Guard] = {
    ClientMessageType.HOST_CONNECT: Guard(frozenset({Role.UNASSIGNED, Role.HOST})),
    ClientMessageType.JOIN_GAME: Guard(frozenset({Role.UNASSIGNED})),
    ClientMessageType.START_GAME: Guard(_HOST),
    ClientMessageType.START_DRAWING_PHASE: Guard(
        _HOST,
        frozenset({Phase.LOBBY, Phase.DRAWING, Phase.VOTING}),
    ),
    ClientMessageType.SUBMIT_DRAWING: Guard(_PLAYER, frozenset({Phase.DRAWING})),
    ClientMessageType.START_VOTING_PHASE: Guard(_HOST, frozenset({Phase.DRAWING})),
    ClientMessageType.SHOW_SUBMISSION: Guard(_HOST, frozenset({Phase.VOTING})),
    ClientMessageType.CAST_VOTE: Guard(_PLAYER, frozenset({Phase.VOTING})),
    ClientMessageType.TIME_UPDATE: Guard(_HOST),
    ClientMessageType.GAME_COMPLETE: Guard(_HOST, frozenset({Phase.VOTING})),
    ClientMessageType.RESET_GAME: Guard(_HOST),
}


def is_allowed(command: ClientMessageType, role: Role, phase: Phase) -> bool:
    guard = GUARDS.get(command)
    return guard is not None and guard.allows(role, phase)
