"""
Properties Reader
=================

Turns a flat ``key=value`` properties file into typed connection parameters.
Files are read as ISO-8859-1, the encoding Java uses for properties files.

The file uses the same keys as the Spring Boot ``application.properties`` of
the accessioning pipelines, so one file can drive both.
"""
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from variant_dbenv.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PROPERTIES_ENCODING = "iso-8859-1"

# Read preference mode names understood by MongoDB drivers
READ_PREFERENCE_MODES = (
    "primary",
    "primaryPreferred",
    "secondary",
    "secondaryPreferred",
    "nearest",
)


class PropertyKeys:
    """Properties file keys for each connection parameter"""
    DATABASE = "spring.data.mongodb.database"
    HOST = "spring.data.mongodb.host"
    PORT = "spring.data.mongodb.port"
    USERNAME = "spring.data.mongodb.username"
    PASSWORD = "spring.data.mongodb.password"
    AUTHENTICATION_DATABASE = "spring.data.mongodb.authentication-database"
    READ_PREFERENCE = "mongodb.read-preference"


# ConnectionParameters field -> properties key
_FIELD_KEYS: Dict[str, str] = {
    "database": PropertyKeys.DATABASE,
    "host": PropertyKeys.HOST,
    "port": PropertyKeys.PORT,
    "username": PropertyKeys.USERNAME,
    "password": PropertyKeys.PASSWORD,
    "authentication_database": PropertyKeys.AUTHENTICATION_DATABASE,
    "read_preference": PropertyKeys.READ_PREFERENCE,
}


class ConnectionParameters(BaseModel):
    """
    Connection parameters for one environment.

    All fields are required. The password is kept as a SecretStr so it never
    shows up in logs, reprs or tracebacks; only the client factory unwraps it.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    database: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: SecretStr
    authentication_database: str = Field(min_length=1)
    read_preference: str

    @field_validator("password")
    @classmethod
    def _password_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("password cannot be empty")
        return value

    @field_validator("read_preference")
    @classmethod
    def _known_read_preference(cls, value: str) -> str:
        if value not in READ_PREFERENCE_MODES:
            raise ValueError(
                f"unknown read preference '{value}', expected one of {', '.join(READ_PREFERENCE_MODES)}"
            )
        return value

    @classmethod
    def from_properties(cls, properties: Mapping[str, Optional[str]]) -> "ConnectionParameters":
        """
        Build parameters from raw properties.

        Args:
            properties: Flat key/value mapping as read from a properties file

        Returns:
            Validated ConnectionParameters

        Raises:
            ConfigurationError: If a key is missing, empty or invalid
        """
        values = {}
        for field_name, key in _FIELD_KEYS.items():
            raw = properties.get(key)
            if raw is None or not str(raw).strip():
                raise ConfigurationError("Missing required property", key=key)
            values[field_name] = raw

        try:
            return cls(**values)
        except ValidationError as err:
            first = err.errors()[0]
            field_name = str(first["loc"][0]) if first.get("loc") else None
            raise ConfigurationError(
                f"Invalid property value: {first['msg']}",
                key=_FIELD_KEYS.get(field_name, field_name),
            ) from err


def read_properties(properties_file: Union[str, Path]) -> Dict[str, Optional[str]]:
    """
    Read a properties file into a flat dict.

    Args:
        properties_file: Path to a ``key=value`` file (``#`` comments allowed)

    Returns:
        Dict of raw string values

    Raises:
        ConfigurationError: If the file cannot be opened or read
    """
    path = Path(properties_file)
    try:
        with path.open(encoding=PROPERTIES_ENCODING) as stream:
            # No ${VAR} expansion: passwords may legitimately contain "$"
            properties = dotenv_values(stream=stream, interpolate=False)
    except OSError as err:
        raise ConfigurationError(f"Cannot read properties file '{path}': {err}") from err

    logger.debug(f"Read {len(properties)} properties from {path}")
    return dict(properties)
