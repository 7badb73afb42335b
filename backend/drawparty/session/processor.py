"""Phase-aware command processor for the drawing party room.

The processor is the only code that mutates a Room. Each inbound command is
checked once against the guard table; commands from the wrong role or in the
wrong phase are dropped without a reply. An allowed command runs validate ->
mutate -> broadcast to completion.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from drawparty.messaging.types import (
    CastVoteMessage,
    ClientMessageType,
    DrawingPhaseStartedMessage,
    DrawingSubmittedConfirmMessage,
    DrawingSubmittedMessage,
    GameCompletedMessage,
    GameResetMessage,
    HostConnectedMessage,
    JoinErrorMessage,
    JoinGameMessage,
    JoinSuccessMessage,
    PlayersUpdatedMessage,
    ShowSubmissionForVotingMessage,
    ShowSubmissionMessage,
    StartDrawingPhaseMessage,
    SubmitDrawingMessage,
    TimeUpdatedMessage,
    TimeUpdateMessage,
    VoteCastConfirmMessage,
    VoteCastMessage,
)
from drawparty.session.guards import is_allowed
from drawparty.session.models import (
    MAX_NAME_LENGTH,
    Phase,
    PlayerIcon,
    Submission,
    VoteRecord,
    is_valid_player_name,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from drawparty.messaging.protocol import ConnectionProtocol
    from drawparty.messaging.types import ClientMessage
    from drawparty.session.broadcast import BroadcastRouter
    from drawparty.session.connections import ConnectionRegistry
    from drawparty.session.models import Player, Room

logger = structlog.get_logger()


class JoinRejection(StrEnum):
    """Human-readable reasons sent back in JOIN_ERROR."""

    INVALID_ROOM_CODE = "Invalid room code"
    GAME_IN_PROGRESS = "Game already in progress"
    ROOM_FULL = "Room is full"
    INVALID_NAME = "Username must be 1-20 characters"
    NAME_TAKEN = "Username already taken"


class CommandProcessor:
    def __init__(self, room: Room, registry: ConnectionRegistry, broadcast: BroadcastRouter) -> None:
        self._room = room
        self._registry = registry
        self._broadcast = broadcast
        self._handlers: dict[ClientMessageType, Callable[..., Awaitable[None]]] = {
            ClientMessageType.HOST_CONNECT: self._handle_host_connect,
            ClientMessageType.JOIN_GAME: self._handle_join_game,
            ClientMessageType.START_GAME: self._handle_start_game,
            ClientMessageType.START_DRAWING_PHASE: self._handle_start_drawing_phase,
            ClientMessageType.SUBMIT_DRAWING: self._handle_submit_drawing,
            ClientMessageType.START_VOTING_PHASE: self._handle_start_voting_phase,
            ClientMessageType.SHOW_SUBMISSION: self._handle_show_submission,
            ClientMessageType.CAST_VOTE: self._handle_cast_vote,
            ClientMessageType.TIME_UPDATE: self._handle_time_update,
            ClientMessageType.GAME_COMPLETE: self._handle_game_complete,
            ClientMessageType.RESET_GAME: self._handle_reset_game,
        }

    async def process(self, connection: ConnectionProtocol, message: ClientMessage) -> bool:
        """Apply one command. Return False when the guard table dropped it."""
        command = ClientMessageType(message.type)
        role = self._registry.role_of(connection.connection_id)
        if not is_allowed(command, role, self._room.phase):
            logger.debug(
                "command ignored",
                command=command,
                role=role,
                phase=self._room.phase,
                connection_id=connection.connection_id,
            )
            return False
        await self._handlers[command](connection, message)
        return True

    def _seated_player(self, connection: ConnectionProtocol) -> Player | None:
        """Return the sender's seat, or None if the channel has no live seat."""
        player_id = self._registry.player_id_of(connection.connection_id)
        if player_id is None:
            return None
        player = self._room.players.get(player_id)
        if player is None or player.connection_id != connection.connection_id:
            return None
        return player

    def _set_phase(self, phase: Phase) -> None:
        if self._room.phase != phase:
            logger.info("phase changed", from_phase=self._room.phase, to_phase=phase)
        self._room.phase = phase

    async def publish_roster(self) -> None:
        await self._broadcast.to_host(PlayersUpdatedMessage(players=self._room.get_player_info()))

    # --- lobby ---

    async def _handle_host_connect(self, connection: ConnectionProtocol, _message: ClientMessage) -> None:
        self._registry.bind_host(connection.connection_id)
        logger.info("host connected", connection_id=connection.connection_id)
        await self._broadcast.to_connection(
            connection,
            HostConnectedMessage(room_code=self._room.room_code, players=self._room.get_player_info()),
        )

    def _check_join(self, message: JoinGameMessage) -> JoinRejection | PlayerIcon:
        """Return the icon the joiner will get, or the first rule the join breaks."""
        room = self._room
        if message.room_code != room.room_code:
            return JoinRejection.INVALID_ROOM_CODE
        if room.in_progress:
            return JoinRejection.GAME_IN_PROGRESS
        icon = room.next_free_icon()
        if room.is_full or icon is None:
            return JoinRejection.ROOM_FULL
        if not is_valid_player_name(message.username):
            return JoinRejection.INVALID_NAME
        if room.name_taken(message.username):
            return JoinRejection.NAME_TAKEN
        return icon

    async def _handle_join_game(self, connection: ConnectionProtocol, message: JoinGameMessage) -> None:
        outcome = self._check_join(message)
        if isinstance(outcome, JoinRejection):
            logger.info("join rejected", reason=outcome, username=message.username[:MAX_NAME_LENGTH])
            await self._broadcast.to_connection(connection, JoinErrorMessage(message=outcome.value))
            return

        player = self._room.seat_player(message.username, outcome, connection)
        self._registry.bind_player(connection.connection_id, player.id)
        logger.info(
            "player joined",
            player_id=player.id,
            username=player.name,
            icon=player.icon,
            player_count=self._room.player_count,
        )

        await self._broadcast.to_connection(connection, JoinSuccessMessage(player=player.to_info()))
        await self.publish_roster()

    async def _handle_start_game(self, _connection: ConnectionProtocol, _message: ClientMessage) -> None:
        self._room.started = True
        logger.info("game started", player_count=self._room.player_count)

    # --- drawing ---

    async def _handle_start_drawing_phase(
        self,
        _connection: ConnectionProtocol,
        message: StartDrawingPhaseMessage,
    ) -> None:
        room = self._room
        self._set_phase(Phase.DRAWING)
        room.category = message.category
        room.prompt = message.prompt
        room.time_remaining = message.time_remaining
        room.submissions = []
        logger.info("drawing phase started", category=room.category, prompt=room.prompt)

        await self._broadcast.to_players(
            DrawingPhaseStartedMessage(
                category=message.category,
                prompt=message.prompt,
                time_remaining=message.time_remaining,
            ),
        )

    async def _handle_submit_drawing(self, connection: ConnectionProtocol, message: SubmitDrawingMessage) -> None:
        room = self._room
        player = self._seated_player(connection)
        if player is None:
            return
        if room.has_submitted(player.id):
            logger.info("duplicate submission ignored", player_id=player.id)
            return

        submission = Submission(
            player_id=player.id,
            player_name=player.name,
            player_icon=player.icon,
            drawing=message.drawing,
            category=room.category or "",
            prompt=room.prompt or "",
        )
        room.submissions.append(submission)
        logger.info("drawing submitted", player_id=player.id, total_submissions=len(room.submissions))

        await self._broadcast.to_host(
            DrawingSubmittedMessage(submission=submission, total_submissions=len(room.submissions)),
        )
        await self._broadcast.to_connection(connection, DrawingSubmittedConfirmMessage())

    # --- voting ---

    async def _handle_start_voting_phase(self, _connection: ConnectionProtocol, _message: ClientMessage) -> None:
        self._set_phase(Phase.VOTING)
        self._room.votes = {}

    async def _handle_show_submission(self, _connection: ConnectionProtocol, message: ShowSubmissionMessage) -> None:
        room = self._room
        room.votes.setdefault(message.submission.player_id, VoteRecord())

        await self._broadcast.to_players(
            ShowSubmissionForVotingMessage(
                submission=message.submission,
                index=message.index,
                total=message.total,
                category=room.category,
                prompt=room.prompt,
            ),
        )

    def _all_players_voted(self, record: VoteRecord) -> bool:
        return bool(self._room.players) and all(pid in record.voters for pid in self._room.players)

    async def _handle_cast_vote(self, connection: ConnectionProtocol, message: CastVoteMessage) -> None:
        room = self._room
        voter = self._seated_player(connection)
        if voter is None:
            return
        if not room.has_submitted(message.submission_id):
            logger.debug("vote for unknown submission ignored", submission_id=message.submission_id)
            return

        record = room.votes.setdefault(message.submission_id, VoteRecord())
        if record.has_voted(voter.id):
            logger.debug("repeat vote ignored", submission_id=message.submission_id, player_id=voter.id)
            return
        record.record(voter.id, message.vote_type)

        await self._broadcast.to_host(
            VoteCastMessage(
                submission_id=message.submission_id,
                votes={owner_id: r.to_tally() for owner_id, r in room.votes.items()},
                all_players_voted=self._all_players_voted(record),
            ),
        )
        await self._broadcast.to_connection(connection, VoteCastConfirmMessage())

    async def _handle_game_complete(self, _connection: ConnectionProtocol, _message: ClientMessage) -> None:
        self._set_phase(Phase.COMPLETE)
        await self._broadcast.to_players(GameCompletedMessage())

    # --- any phase ---

    async def _handle_time_update(self, _connection: ConnectionProtocol, message: TimeUpdateMessage) -> None:
        self._room.time_remaining = message.time_remaining
        await self._broadcast.to_players(TimeUpdatedMessage(time_remaining=message.time_remaining))

    async def _handle_reset_game(self, _connection: ConnectionProtocol, _message: ClientMessage) -> None:
        self._room.reset()
        logger.info("game reset")
        await self._broadcast.to_everyone(GameResetMessage())
