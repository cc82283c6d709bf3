# api/core/config.py
from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Lead form settings, read from the environment and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Literal["development", "testing", "staging", "production"] = Field(
        default="development", validation_alias="ENVIRONMENT"
    )

    # HTTP service
    api_host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
    allowed_origins: str = Field(default="*", validation_alias="ALLOWED_ORIGINS")
    allowed_methods: str = Field(default="GET,POST,OPTIONS", validation_alias="ALLOWED_METHODS")
    allowed_headers: str = Field(default="Content-Type,X-Request-ID", validation_alias="ALLOWED_HEADERS")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", validation_alias="LOG_FORMAT")
    sentry_dsn: Optional[str] = Field(default=None, validation_alias="SENTRY_DSN")

    # Google Sheets destination per lead type. The credentials value is the
    # service account key itself, serialized as JSON.
    google_application_credentials: str = Field(default="{}", validation_alias="GOOGLE_APPLICATION_CREDENTIALS")
    sheet_id_buy: str = Field(default="1iyX-81lCSs6u9NFg4qu0g9GpJ1LBha1VKlQOJppLTs8", validation_alias="SHEET_ID_BUY")
    sheet_id_sell: str = Field(default="1Mp1i2RUzuAm5IYWyq5erKDTqhw9uBiqU3sK1KJc5Pi0", validation_alias="SHEET_ID_SELL")
    sheet_id_rent: str = Field(default="15XZrPHqFxUkA3cFNECV-jNO8y_CZTPpM5wCWgAzw1yg", validation_alias="SHEET_ID_RENT")
    sheet_append_range: str = Field(default="A2", validation_alias="SHEET_APPEND_RANGE")
    sheet_value_input_option: Literal["RAW", "USER_ENTERED"] = Field(
        default="USER_ENTERED", validation_alias="SHEET_VALUE_INPUT_OPTION"
    )
    sheet_insert_data_option: Literal["INSERT_ROWS", "OVERWRITE"] = Field(
        default="INSERT_ROWS", validation_alias="SHEET_INSERT_DATA_OPTION"
    )

    # Where the terminal questionnaire posts finished submissions
    submit_url: str = Field(default="http://localhost:8000/api/submit-form", validation_alias="SUBMIT_URL")
    submit_timeout_seconds: Optional[float] = Field(default=None, validation_alias="SUBMIT_TIMEOUT_SECONDS")

    @field_validator("log_level")
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v!r}")
        return level

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    def origins(self) -> List[str]:
        return _split_csv(self.allowed_origins)

    def methods(self) -> List[str]:
        return _split_csv(self.allowed_methods)

    def headers(self) -> List[str]:
        return _split_csv(self.allowed_headers)

    def sheet_ids(self) -> Dict[str, str]:
        """Destination spreadsheet per lead type."""
        return {
            "buy": self.sheet_id_buy,
            "sell": self.sheet_id_sell,
            "rent": self.sheet_id_rent,
        }


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


settings = Settings()
