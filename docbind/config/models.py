"""Configuration models for docbind."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_CONNECTION_STRING_SETTING = "AzureWebJobsCosmosDBConnectionString"


class LoggingConfig(BaseModel):
    """Logging configuration applied by the CLI."""

    level: str = Field(default="INFO")
    format: str = Field(default="%(asctime)s %(levelname)s %(name)s: %(message)s")
    redact_secrets: bool = Field(default=True)


class DocBindConfig(BaseSettings):
    """Root configuration model for docbind.

    ``DOCBIND_*`` variables are applied by ``load_config``, which keeps the
    case of secret names; validating the model never reads the environment.
    """

    connection_string: str = Field(
        default="",
        description="Globally configured default connection string.",
    )
    connection_string_setting: str = Field(
        default=DEFAULT_CONNECTION_STRING_SETTING,
        description="Setting name resolved for the process-wide default connection string.",
    )
    env_file: str | None = Field(default=None, description="Optional .env file consulted by the name resolver.")
    secrets: dict[str, str] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="DOCBIND_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)
