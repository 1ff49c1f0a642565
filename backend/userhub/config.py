"""
Environment variable loading and validation.

The backend refuses to start unless the process environment describes a
complete configuration.  Every key is validated independently and all
violations are reported together so operators can fix the environment in one
pass.
"""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

MISSING_MESSAGES: Dict[str, str] = {
    "NODE_ENV": 'It is required to set the "NODE_ENV"',
    "HTTP_TIMEOUT": "It is required to set the http timeout",
    "INFLUXDB_USER": "It is required to set the influx user",
    "INFLUXDB_USER_PASSWORD": "It is required to set the influx password",
    "INFLUXDB_ORG": "It is required to set the influx org",
    "INFLUXDB_BUCKET": "It is required to set the influx bucket",
    "INFLUXDB_MEASUREMENT_NAME": "It is required to set the influx measurement name",
    "INFLUXDB_PORT": "It is required to set the influx port",
    "INFLUXDB_HOST": "It is required to set the influx host",
    "INFLUXDB_URL": "It is required to set the influx url",
    "INFLUXDB_TOKEN": "It is required to set the influx token",
}

INVALID_NUMBER = "It is required to set a valid number value"


class EnvironmentVariables(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    node_env: Literal["test", "development", "production"] = Field(alias="NODE_ENV")
    port: int = Field(default=3000, alias="PORT")

    http_timeout: int = Field(alias="HTTP_TIMEOUT")

    influxdb_user: str = Field(alias="INFLUXDB_USER", min_length=1)
    influxdb_user_password: str = Field(
        alias="INFLUXDB_USER_PASSWORD", min_length=1, repr=False
    )
    influxdb_org: str = Field(alias="INFLUXDB_ORG", min_length=1)
    influxdb_bucket: str = Field(alias="INFLUXDB_BUCKET", min_length=1)
    influxdb_measurement_name: str = Field(alias="INFLUXDB_MEASUREMENT_NAME", min_length=1)
    influxdb_port: int = Field(alias="INFLUXDB_PORT")
    influxdb_host: str = Field(alias="INFLUXDB_HOST", min_length=1)
    influxdb_url: str = Field(alias="INFLUXDB_URL", min_length=1)
    influxdb_token: str = Field(alias="INFLUXDB_TOKEN", min_length=1, repr=False)
    influxdb_protocol: Optional[Literal["http", "https"]] = Field(
        default=None, alias="INFLUXDB_PROTOCOL"
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/userhub.db", alias="DATABASE_URL"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator("port", "http_timeout", "influxdb_port", mode="before")
    @classmethod
    def parse_whole_number(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(INVALID_NUMBER) from None
        if not number.is_finite() or number != number.to_integral_value():
            raise ValueError(INVALID_NUMBER)
        return int(number)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @property
    def is_production(self) -> bool:
        return self.node_env == "production"

    @property
    def is_test(self) -> bool:
        return self.node_env == "test"


def format_errors(exc: ValidationError) -> List[str]:
    messages: List[str] = []
    for error in exc.errors():
        key = ".".join(str(part) for part in error["loc"]) or "<root>"
        if error["type"] == "missing":
            message = MISSING_MESSAGES.get(key, "It is required to set a value")
        else:
            message = error["msg"].removeprefix("Value error, ")
        messages.append(f"{key}: {message}")
    return messages


def load_environment(
    environ: Mapping[str, str] | None = None,
    env_file: Path | str | None = None,
) -> EnvironmentVariables:
    """
    Validate the environment and return the typed configuration.

    Parameters
    ----------
    environ:
        Raw key/value mapping.  Defaults to ``os.environ`` after an optional
        ``.env`` file has been loaded.
    env_file:
        ``.env`` file to load when reading from the process environment.
        Falls back to ``ENV_FILE`` and then to python-dotenv's own lookup.
    """

    if environ is None:
        load_dotenv(env_file or os.environ.get("ENV_FILE"))
        environ = os.environ

    # Empty values count as unset.
    raw = {key: value for key, value in environ.items() if value != ""}
    try:
        return EnvironmentVariables.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(format_errors(exc)) from exc
