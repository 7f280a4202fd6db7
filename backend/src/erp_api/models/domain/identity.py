"""Authenticated identity domain model."""

from pydantic import BaseModel, ConfigDict


class Identity(BaseModel):
    """Caller identity derived from a verified access token.

    Lives for a single request and is immutable once constructed.
    """

    model_config = ConfigDict(frozen=True)

    subject_id: str
    role_name: str | None = None
