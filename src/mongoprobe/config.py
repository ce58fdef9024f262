import logging
from urllib.parse import urlparse
from pymongo.errors import PyMongoError
from pymongo.uri_parser import parse_uri
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "mongodb://localhost:27017/testdb"

# MongoDB falls back to this database when the URI does not name one
DEFAULT_DATABASE_NAME = "test"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class ProbeSettings(BaseSettings):
    """
    Probe configuration, read from the environment only.

    DATABASE_URL     endpoint to probe (defaults to a local testdb)
    PROBE_LOG_LEVEL  level of the 'mongoprobe' logger
    """
    model_config = SettingsConfigDict(populate_by_name=True)

    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = Field("WARNING", validation_alias="PROBE_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got '{value}'")
        return level

    @classmethod
    def load(cls, **overrides) -> "ProbeSettings":
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid probe configuration: {e}")

    @property
    def database_name(self) -> str:
        return database_name_from_url(self.database_url)

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

def redact_url(url: str) -> str:
    """Mask the password part of a connection string so it can be logged."""
    parsed = urlparse(url)
    userinfo, sep, hostinfo = parsed.netloc.rpartition("@")
    if not sep or ":" not in userinfo:
        return url
    user = userinfo.split(":", 1)[0]
    return parsed._replace(netloc=f"{user}:***@{hostinfo}").geturl()

def database_name_from_url(url: str) -> str:
    """
    Database named by a connection string, read the way pymongo reads it
    (percent-decoded, '.collection' suffix dropped).
    """
    scheme, _, rest = url.partition("://")
    if scheme == "mongodb+srv":
        # parse_uri resolves SRV records over DNS; the path is parsed the same for a plain URI
        url = "mongodb://" + rest.partition("?")[0]
    try:
        database = parse_uri(url, validate=False)["database"]
    except PyMongoError:
        # connect() reports the same driver error for this URI
        database = None
    return database or DEFAULT_DATABASE_NAME
