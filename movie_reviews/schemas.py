"""
Pydantic schemas for incoming documents (one per entity kind).
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictStr

# BSON stores integers as signed 64-bit
Int64 = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]


class DocumentIn(BaseModel):
    # unknown keys (including _id and timestamps) are dropped
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class UserIn(DocumentIn):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)


class MovieIn(DocumentIn):
    title: str = Field(..., min_length=1)
    genre: str | None = None
    releaseYear: Int64 | None = None
    director: str | None = None


class PostIn(DocumentIn):
    title: str | None = None
    content: str | None = None
    user: StrictStr | None = None


class ReviewIn(DocumentIn):
    rating: int = Field(..., ge=1, le=10)
    comment: str | None = None
    movieId: StrictStr | None = None
    userId: StrictStr | None = None
