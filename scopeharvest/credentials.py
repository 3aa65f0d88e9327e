"""Credential normalization and Basic auth token construction."""

import base64

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scopeharvest.errors import InvalidCredentialFormatError


def normalize_credential(raw: str) -> str:
    """Remove every whitespace character from a credential.

    Pasted keys often carry a trailing newline or stray spaces, which break
    the Base64 Authorization header.

    Args:
        raw: Credential as typed or pasted by the user.

    Returns:
        The credential with all whitespace code points removed.
    """
    return "".join(ch for ch in raw if not ch.isspace())


def build_basic_auth_token(combined: str) -> str:
    """Build the Base64 token for a ``username:key`` credential.

    Args:
        combined: Credential pair joined by ``:``.

    Returns:
        Base64 encoding of ``username:key``.

    Raises:
        InvalidCredentialFormatError: If there is no ``:`` separator.
    """
    username, sep, key = combined.partition(":")
    if not sep:
        raise InvalidCredentialFormatError()
    return base64.b64encode(f"{username}:{key}".encode()).decode("ascii")


class Credentials(BaseModel):
    """Platform credentials for one run. Never persisted."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    username: str = Field(default="", description="Platform username")
    api_key: str = Field(min_length=1, repr=False, description="Platform API key")

    @field_validator("username", "api_key", mode="before")
    @classmethod
    def strip_whitespace(cls, v: object) -> object:
        """Normalize raw strings before validation."""
        if isinstance(v, str):
            return normalize_credential(v)
        return v

    @property
    def combined(self) -> str:
        """Get the ``username:api_key`` pair."""
        return f"{self.username}:{self.api_key}"
