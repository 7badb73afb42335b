"""Room state models for the drawing party server."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from drawparty.messaging.wire import WireModel

if TYPE_CHECKING:
    from drawparty.messaging.protocol import ConnectionProtocol

DEFAULT_TIME_REMAINING = 60
MAX_NAME_LENGTH = 20

_SPACE_ORD = 0x20
_DEL_ORD = 0x7F


class Phase(StrEnum):
    LOBBY = "lobby"
    DRAWING = "drawing"
    VOTING = "voting"
    COMPLETE = "complete"


class PlayerIcon(StrEnum):
    CABBAGE = "cabbage"
    CARROT = "carrot"
    CRAB = "crab"
    EGGPLANT = "eggplant"
    ELBOW = "elbow"
    TOMATO = "tomato"


# One icon per seat, so the icon set caps the room size.
MAX_PLAYERS = len(PlayerIcon)

VoteType = Literal["up", "down"]


class PlayerInfo(WireModel):
    """Player info for roster messages (sent over WebSocket)."""

    id: int
    name: str
    icon: PlayerIcon


class Submission(WireModel):
    """One player's drawing for the current round.

    Owner details are copied in at capture time so the host can render a
    submission without looking the player up again. The drawing is an
    opaque encoded image and is never inspected.
    """

    player_id: int
    player_name: str
    player_icon: PlayerIcon
    drawing: str
    category: str
    prompt: str


class VoteTally(WireModel):
    up: int
    down: int


@dataclass
class Player:
    """Player seated in the room, bound to the channel that joined."""

    id: int
    name: str
    icon: PlayerIcon
    connection: ConnectionProtocol

    @property
    def connection_id(self) -> str:
        return self.connection.connection_id

    def to_info(self) -> PlayerInfo:
        return PlayerInfo(id=self.id, name=self.name, icon=self.icon)


@dataclass
class VoteRecord:
    """Up/down counts for one submission plus the ids of players who voted on it."""

    up: int = 0
    down: int = 0
    voters: set[int] = field(default_factory=set)

    def has_voted(self, player_id: int) -> bool:
        return player_id in self.voters

    def record(self, player_id: int, vote_type: VoteType) -> None:
        if vote_type == "up":
            self.up += 1
        else:
            self.down += 1
        self.voters.add(player_id)

    def to_tally(self) -> VoteTally:
        return VoteTally(up=self.up, down=self.down)


def is_valid_player_name(name: str) -> bool:
    """Names are 1-20 characters with no control characters."""
    if not 1 <= len(name) <= MAX_NAME_LENGTH:
        return False
    return not any(ord(c) < _SPACE_ORD or ord(c) == _DEL_ORD for c in name)


@dataclass
class Room:
    """The single game session.

    Players are keyed by id in join order. Player ids come from a counter
    that survives resets, so an id is never reused while the process lives.
    """

    room_code: str
    max_players: int = MAX_PLAYERS
    phase: Phase = Phase.LOBBY
    started: bool = False
    category: str | None = None
    prompt: str | None = None
    time_remaining: int = DEFAULT_TIME_REMAINING
    players: dict[int, Player] = field(default_factory=dict)
    submissions: list[Submission] = field(default_factory=list)
    votes: dict[int, VoteRecord] = field(default_factory=dict)
    next_player_id: int = 1

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def is_full(self) -> bool:
        return self.player_count >= self.max_players

    @property
    def in_progress(self) -> bool:
        """A game counts as in progress once the host starts it or leaves the lobby."""
        return self.started or self.phase != Phase.LOBBY

    def name_taken(self, name: str) -> bool:
        return any(p.name == name for p in self.players.values())

    def next_free_icon(self) -> PlayerIcon | None:
        """Return the first icon in fixed order that no seated player holds."""
        used = {p.icon for p in self.players.values()}
        for icon in PlayerIcon:
            if icon not in used:
                return icon
        return None

    def seat_player(self, name: str, icon: PlayerIcon, connection: ConnectionProtocol) -> Player:
        player = Player(id=self.next_player_id, name=name, icon=icon, connection=connection)
        self.next_player_id += 1
        self.players[player.id] = player
        return player

    def remove_player(self, player_id: int) -> Player | None:
        return self.players.pop(player_id, None)

    def get_player_info(self) -> list[PlayerInfo]:
        return [p.to_info() for p in self.players.values()]

    def has_submitted(self, player_id: int) -> bool:
        return any(s.player_id == player_id for s in self.submissions)

    def clear_roster(self) -> None:
        self.players.clear()
        self.started = False

    def reset(self) -> None:
        """Return to a fresh lobby. The room code and id counter are kept."""
        self.clear_roster()
        self.phase = Phase.LOBBY
        self.category = None
        self.prompt = None
        self.time_remaining = DEFAULT_TIME_REMAINING
        self.submissions = []
        self.votes = {}
