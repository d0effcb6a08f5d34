"""
Record API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RecordWrite(BaseModel):
    """
    Body for create and update.

    Names are optional at the schema level; emptiness is checked by the
    service so that it can answer with the record-specific 422 payload.
    Any `id` in the body is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    first_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("firstname", "first_name"),
    )
    last_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("lastname", "last_name"),
    )


class RecordResponse(BaseModel):
    id: int
    firstname: str
    lastname: str
