"""Connection settings for schemaspy.

This module provides:
* `PgConnection`: a pydantic model holding PostgreSQL connection info and the
  namespace (schema) to describe.
* `create_catalog_engine`: builds the SQLAlchemy engine used for catalog reads
  from either a URL string or a `PgConnection`.
"""
from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field, SecretStr, field_validator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

DEFAULT_SCHEMA = "public"


class PgConnection(BaseModel):
    """PostgreSQL connection parameters."""

    host: str = Field(..., description="Hostname or IP address")
    port: int = Field(5432, description="TCP port")
    database: str = Field(..., description="Database name")
    user: str = Field(..., description="Username")
    password: SecretStr = Field(SecretStr(""), description="Password")
    schema_name: str = Field(DEFAULT_SCHEMA, description="Namespace to describe")

    @field_validator("host")
    @classmethod
    def non_empty(cls, v: str) -> str:  # noqa: D401, N805
        if not v:
            raise ValueError("host cannot be empty")
        return v

    def sqlalchemy_url(self) -> str:
        """Return a postgres+psycopg2 URL string."""
        return (
            f"postgresql+psycopg2://{self.user}:{self.password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    @classmethod
    def from_url(cls, url: str, schema_name: str = DEFAULT_SCHEMA) -> "PgConnection":
        """Parse a ``postgresql://`` URL into connection settings."""
        parsed = make_url(url)
        return cls(
            host=parsed.host or "",
            port=parsed.port or 5432,
            database=parsed.database or "",
            user=parsed.username or "",
            password=parsed.password or "",
            schema_name=schema_name,
        )


def create_catalog_engine(target: Union[str, PgConnection]) -> Engine:
    """Return an engine for *target*, a URL or a `PgConnection`."""
    url = target.sqlalchemy_url() if isinstance(target, PgConnection) else target
    return create_engine(url, future=True)
