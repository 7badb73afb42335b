import json
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from drawparty.messaging.wire import WireModel
from drawparty.session.models import PlayerInfo, Submission, VoteTally, VoteType

DEFAULT_MAX_MESSAGE_BYTES = 4 * 1024 * 1024


class ClientMessageType(StrEnum):
    HOST_CONNECT = "HOST_CONNECT"
    JOIN_GAME = "JOIN_GAME"
    START_GAME = "START_GAME"
    START_DRAWING_PHASE = "START_DRAWING_PHASE"
    SUBMIT_DRAWING = "SUBMIT_DRAWING"
    START_VOTING_PHASE = "START_VOTING_PHASE"
    SHOW_SUBMISSION = "SHOW_SUBMISSION"
    CAST_VOTE = "CAST_VOTE"
    TIME_UPDATE = "TIME_UPDATE"
    GAME_COMPLETE = "GAME_COMPLETE"
    RESET_GAME = "RESET_GAME"


class ServerMessageType(StrEnum):
    HOST_CONNECTED = "HOST_CONNECTED"
    JOIN_SUCCESS = "JOIN_SUCCESS"
    JOIN_ERROR = "JOIN_ERROR"
    PLAYERS_UPDATED = "PLAYERS_UPDATED"
    DRAWING_PHASE_STARTED = "DRAWING_PHASE_STARTED"
    DRAWING_SUBMITTED = "DRAWING_SUBMITTED"
    DRAWING_SUBMITTED_CONFIRM = "DRAWING_SUBMITTED_CONFIRM"
    SHOW_SUBMISSION_FOR_VOTING = "SHOW_SUBMISSION_FOR_VOTING"
    VOTE_CAST = "VOTE_CAST"
    VOTE_CAST_CONFIRM = "VOTE_CAST_CONFIRM"
    TIME_UPDATE = "TIME_UPDATE"
    GAME_COMPLETE = "GAME_COMPLETE"
    GAME_RESET = "GAME_RESET"


# --- client -> server ---


class HostConnectMessage(WireModel):
    type: Literal[ClientMessageType.HOST_CONNECT] = ClientMessageType.HOST_CONNECT


class JoinGameMessage(WireModel):
    type: Literal[ClientMessageType.JOIN_GAME] = ClientMessageType.JOIN_GAME
    # Code and name rules are enforced at join time so that the sender gets a
    # JOIN_ERROR instead of silence. The frame size limit bounds both.
    room_code: str
    username: str


class StartGameMessage(WireModel):
    type: Literal[ClientMessageType.START_GAME] = ClientMessageType.START_GAME


class StartDrawingPhaseMessage(WireModel):
    type: Literal[ClientMessageType.START_DRAWING_PHASE] = ClientMessageType.START_DRAWING_PHASE
    category: str = Field(min_length=1, max_length=200)
    prompt: str = Field(min_length=1, max_length=500)
    time_remaining: int = Field(ge=0)


class SubmitDrawingMessage(WireModel):
    type: Literal[ClientMessageType.SUBMIT_DRAWING] = ClientMessageType.SUBMIT_DRAWING
    drawing: str = Field(min_length=1)


class StartVotingPhaseMessage(WireModel):
    type: Literal[ClientMessageType.START_VOTING_PHASE] = ClientMessageType.START_VOTING_PHASE


class ShowSubmissionMessage(WireModel):
    type: Literal[ClientMessageType.SHOW_SUBMISSION] = ClientMessageType.SHOW_SUBMISSION
    submission: Submission
    index: int = Field(ge=0)
    total: int = Field(ge=0)


class CastVoteMessage(WireModel):
    type: Literal[ClientMessageType.CAST_VOTE] = ClientMessageType.CAST_VOTE
    submission_id: int
    vote_type: VoteType = "up"


class TimeUpdateMessage(WireModel):
    type: Literal[ClientMessageType.TIME_UPDATE] = ClientMessageType.TIME_UPDATE
    time_remaining: int = Field(ge=0)


class GameCompleteMessage(WireModel):
    type: Literal[ClientMessageType.GAME_COMPLETE] = ClientMessageType.GAME_COMPLETE


class ResetGameMessage(WireModel):
    type: Literal[ClientMessageType.RESET_GAME] = ClientMessageType.RESET_GAME


ClientMessage = Annotated[
    HostConnectMessage
    | JoinGameMessage
    | StartGameMessage
    | StartDrawingPhaseMessage
    | SubmitDrawingMessage
    | StartVotingPhaseMessage
    | ShowSubmissionMessage
    | CastVoteMessage
    | TimeUpdateMessage
    | GameCompleteMessage
    | ResetGameMessage,
    Field(discriminator="type"),
]

_client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)


def parse_client_message(raw: str, max_bytes: int = DEFAULT_MAX_MESSAGE_BYTES) -> ClientMessage:
    """Parse and validate a raw JSON text frame into a typed client message.

    Raises ValueError for oversized or non-JSON frames and ValidationError
    for unknown types or bad payloads.
    """
    byte_len = len(raw.encode("utf-8"))
    if byte_len > max_bytes:
        raise ValueError(f"Message too large ({byte_len} bytes, max {max_bytes})")
    data = json.loads(raw)
    return _client_message_adapter.validate_python(data)


# --- server -> client ---


class HostConnectedMessage(WireModel):
    type: Literal[ServerMessageType.HOST_CONNECTED] = ServerMessageType.HOST_CONNECTED
    room_code: str
    players: list[PlayerInfo]


class JoinSuccessMessage(WireModel):
    type: Literal[ServerMessageType.JOIN_SUCCESS] = ServerMessageType.JOIN_SUCCESS
    player: PlayerInfo


class JoinErrorMessage(WireModel):
    type: Literal[ServerMessageType.JOIN_ERROR] = ServerMessageType.JOIN_ERROR
    message: str


class PlayersUpdatedMessage(WireModel):
    type: Literal[ServerMessageType.PLAYERS_UPDATED] = ServerMessageType.PLAYERS_UPDATED
    players: list[PlayerInfo]


class DrawingPhaseStartedMessage(WireModel):
    type: Literal[ServerMessageType.DRAWING_PHASE_STARTED] = ServerMessageType.DRAWING_PHASE_STARTED
    category: str
    prompt: str
    time_remaining: int


class DrawingSubmittedMessage(WireModel):
    type: Literal[ServerMessageType.DRAWING_SUBMITTED] = ServerMessageType.DRAWING_SUBMITTED
    submission: Submission
    total_submissions: int


class DrawingSubmittedConfirmMessage(WireModel):
    type: Literal[ServerMessageType.DRAWING_SUBMITTED_CONFIRM] = ServerMessageType.DRAWING_SUBMITTED_CONFIRM


class ShowSubmissionForVotingMessage(WireModel):
    type: Literal[ServerMessageType.SHOW_SUBMISSION_FOR_VOTING] = ServerMessageType.SHOW_SUBMISSION_FOR_VOTING
    submission: Submission
    index: int
    total: int
    category: str | None
    prompt: str | None


class VoteCastMessage(WireModel):
    type: Literal[ServerMessageType.VOTE_CAST] = ServerMessageType.VOTE_CAST
    submission_id: int
    votes: dict[int, VoteTally]
    all_players_voted: bool


class VoteCastConfirmMessage(WireModel):
    type: Literal[ServerMessageType.VOTE_CAST_CONFIRM] = ServerMessageType.VOTE_CAST_CONFIRM


class TimeUpdatedMessage(WireModel):
    type: Literal[ServerMessageType.TIME_UPDATE] = ServerMessageType.TIME_UPDATE
    time_remaining: int


class GameCompletedMessage(WireModel):
    type: Literal[ServerMessageType.GAME_COMPLETE] = ServerMessageType.GAME_COMPLETE


class GameResetMessage(WireModel):
    type: Literal[ServerMessageType.GAME_RESET] = ServerMessageType.GAME_RESET
