"""Party server configuration via environment variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from drawparty.messaging.types import DEFAULT_MAX_MESSAGE_BYTES
from drawparty.session.models import MAX_PLAYERS
from shared.validators import StringListEnvSettingsSource, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class PartyServerSettings(BaseSettings):
    model_config = {"env_prefix": "PARTY_", "populate_by_name": True}

    host: str = "0.0.0.0"  # noqa: S104
    # Plain PORT is honoured as well, matching common hosting platforms.
    port: int = Field(default=3001, ge=1, le=65535, validation_alias=AliasChoices("PARTY_PORT", "PORT"))
    room_code: str = Field(default="ABCD", pattern=r"^[A-Z0-9]{4}$")
    max_players: int = Field(default=MAX_PLAYERS, ge=1, le=MAX_PLAYERS)
    max_message_bytes: int = Field(default=DEFAULT_MAX_MESSAGE_BYTES, ge=1024)
    cors_origins: list[str] = ["http://localhost:5173"]
    log_dir: str | None = None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, StringListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings
