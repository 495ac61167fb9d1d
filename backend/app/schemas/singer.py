"""
Singers API — Pydantic Request/Response Schemas
=================================================

What:  Typed DTOs for every request body and the shared response envelopes.
Why:   Payloads are checked declaratively before any database call.
How:   Routes call `Model.model_validate(payload)`; failures become
       ValidationError / InvalidInputError in the route layer.

Schema rules (all models):
    - Unknown keys are rejected (extra="forbid")
    - Strings must be non-empty
    - Explicit nulls are rejected; omit a field instead
    - Integer ids accept numbers and numeric strings, never booleans
    - Patch models accept any subset of fields but never an empty body
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"'{name}' may not be null")
        return self


class _Patch(_Strict):
    """Base for merge-patch bodies: fields are optional but not nullable."""

    @model_validator(mode="after")
    def reject_empty(self):
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self

    def changes(self) -> Dict[str, Any]:
        """Only the fields present in the request body."""
        return self.model_dump(exclude_unset=True)


def _reject_bool(value: Any) -> Any:
    # JSON true/false would otherwise coerce to 1/0
    if isinstance(value, bool):
        raise ValueError("must be an integer, not a boolean")
    return value


ArtistId = Annotated[int, BeforeValidator(_reject_bool), Field(ge=1, le=1000)]


# ══════════════════════════════════════════════════════════════════════════
# Embedded model
# ══════════════════════════════════════════════════════════════════════════


class BandMember(_Strict):
    """One embedded band member sub-document."""

    singer_name: Optional[str] = Field(default=None, min_length=1)
    instruments: Optional[List[str]] = None


class SingerCreate(_Strict):
    """
    What:  Body of POST /singer for the embedded model.

    Example:
        {"artistname": "Queen",
         "band_members": [{"singer_name": "Freddie", "instruments": ["vocals"]}]}
    """

    artistname: str = Field(min_length=1)
    band_members: Optional[List[BandMember]] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class SingerPatch(_Patch):
    """Body of PATCH /singer/{id} for the embedded model."""

    artistname: Optional[str] = Field(default=None, min_length=1)
    band_members: Optional[List[BandMember]] = None


# ══════════════════════════════════════════════════════════════════════════
# Relational model
# ══════════════════════════════════════════════════════════════════════════


class RelationalSingerCreate(_Strict):
    """Body of POST /singer for the relational model, e.g. {"id": 7, "artistname": "Rush"}."""

    id: ArtistId
    artistname: str = Field(min_length=1)


class RelationalSingerPatch(_Patch):
    id: Optional[ArtistId] = None
    artistname: Optional[str] = Field(default=None, min_length=1)


class InstrumentCreate(_Strict):
    """Body of POST /instrument: one band member joined to a singer by artist_id."""

    artist_id: ArtistId
    singer_name: Optional[str] = Field(default=None, min_length=1)
    instruments: List[str] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class InsertResult(BaseModel):
    acknowledged: bool = True
    inserted_id: str


class InsertResponse(BaseModel):
    """
    What:  Envelope returned by every successful create.

    Example:
        {"result": {"acknowledged": true, "inserted_id": "..."},
         "document": {"_id": "...", "artistname": "Queen"},
         "msg": "Successfully inserted Data!!!",
         "error": null}
    """

    result: InsertResult
    document: Dict[str, Any]
    msg: str = "Successfully inserted Data!!!"
    error: None = None


class ErrorResponse(BaseModel):
    """`error` is a string for most failures, an object for forwarded insert errors."""

    error: Any = Field(description="Raw error text or error object")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    singer_model: str = Field(description="Active data model: embedded, relational")
    uptime_seconds: float = Field(description="Seconds since service started")


def describe_errors(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """Flattens Pydantic errors into {"message", "path", "type"} entries."""
    return [
        {
            "message": error["msg"],
            "path": [part for part in error["loc"]],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
