"""
Relay service configuration.
Values are read from the process environment (and an optional .env file)
every time `get_settings()` is called.
"""

from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError

# Field name -> environment variable reported to operators
ENV_VAR_NAMES: dict[str, str] = {
    "supabase_url": "SUPABASE_URL",
    "supabase_service_role_key": "SUPABASE_SERVICE_ROLE_KEY",
    "document_processing_webhook_url": "DOCUMENT_PROCESSING_WEBHOOK_URL",
    "notebook_generation_auth": "NOTEBOOK_GENERATION_AUTH",
    "notebook_chat_url": "NOTEBOOK_CHAT_URL",
}


class RelaySettings(BaseSettings):
    """
    Recognized configuration keys for both relay handlers.

    Secrets and endpoint URLs keep the bare names the hosting platform
    injects; server knobs use the RELAY_ prefix.
    """

    # === Status store ===
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_URL", "supabase_url"),
        description="Base URL of the Supabase project",
    )
    supabase_service_role_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUPABASE_SERVICE_ROLE_KEY", "supabase_service_role_key"
        ),
        description="Service role key used for status writes",
    )
    status_table: str = Field(
        default="sources",
        validation_alias=AliasChoices("RELAY_STATUS_TABLE", "status_table"),
    )
    storage_bucket: str = Field(
        default="sources",
        validation_alias=AliasChoices("RELAY_STORAGE_BUCKET", "storage_bucket"),
    )
    callback_function: str = Field(
        default="process-document-callback",
        validation_alias=AliasChoices("RELAY_CALLBACK_FUNCTION", "callback_function"),
    )

    # === Webhooks ===
    document_processing_webhook_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "DOCUMENT_PROCESSING_WEBHOOK_URL", "document_processing_webhook_url"
        ),
    )
    notebook_generation_auth: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "NOTEBOOK_GENERATION_AUTH", "notebook_generation_auth"
        ),
        description="Authorization header value sent to the webhooks",
    )
    notebook_chat_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("NOTEBOOK_CHAT_URL", "notebook_chat_url"),
    )

    # === Server ===
    host: str = Field(
        default="0.0.0.0", validation_alias=AliasChoices("RELAY_HOST", "host")
    )
    port: int = Field(default=8000, validation_alias=AliasChoices("RELAY_PORT", "port"))
    log_level: str = Field(
        default="INFO", validation_alias=AliasChoices("RELAY_LOG_LEVEL", "log_level")
    )
    log_json: bool = Field(
        default=False, validation_alias=AliasChoices("RELAY_LOG_JSON", "log_json")
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator(
        "supabase_url",
        "supabase_service_role_key",
        "document_processing_webhook_url",
        "notebook_generation_auth",
        "notebook_chat_url",
        mode="before",
    )
    @classmethod
    def empty_as_unset(cls, v):
        """Treat empty strings as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    def require(self, field_name: str) -> str:
        """
        Return a configured value or raise ConfigurationError naming
        the environment variable that is missing.
        """
        value = getattr(self, field_name)
        if not value:
            env_name = ENV_VAR_NAMES.get(field_name, field_name.upper())
            raise ConfigurationError(
                message=(
                    f"{env_name} environment variable not set. "
                    "Please configure this secret for the relay service."
                ),
                error_code="MISSING_CONFIGURATION",
                details={"variable": env_name},
            )
        return value

    @property
    def storage_base_url(self) -> str:
        return (self.supabase_url or "").rstrip("/")

    def public_file_url(self, file_path: str) -> str:
        """Public storage URL for an uploaded source file."""
        return (
            f"{self.storage_base_url}/storage/v1/object/public/"
            f"{self.storage_bucket}/{file_path}"
        )

    def callback_url(self) -> str:
        """URL the document webhook reports completion to."""
        return f"{self.storage_base_url}/functions/v1/{self.callback_function}"

    def presence(self) -> dict[str, bool]:
        """Which recognized secrets/endpoints are set (values never exposed)."""
        return {f"has_{name}": bool(getattr(self, name)) for name in ENV_VAR_NAMES}

    def log_configuration(self) -> dict[str, Any]:
        """Loggable view of the configuration without secret values."""
        return {
            "supabase_url": self.supabase_url or "Not configured",
            "service_role_key": "Configured"
            if self.supabase_service_role_key
            else "Not configured",
            "document_webhook": self.document_processing_webhook_url
            or "Not configured",
            "chat_webhook": self.notebook_chat_url or "Not configured",
            "webhook_auth": "Configured"
            if self.notebook_generation_auth
            else "Not configured",
        }


def get_settings() -> RelaySettings:
    """Build settings from the current environment. Never cached."""
    return RelaySettings()
