"""Entity: Book."""

from pydantic import BaseModel, Field

# Ids are 64-bit signed integers in the store.
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1
# status is stored as a SMALLINT.
STATUS_MIN = -(2**15)
STATUS_MAX = 2**15 - 1


class Timestamp(BaseModel):
    """Wire representation of a point in time.

    ``seconds`` counts from the Unix epoch in UTC; ``nanos`` is the
    non-negative sub-second fraction. Range checks happen in the timestamp
    codec so that a bad value surfaces as an InvalidArgument failure rather
    than a request parsing error.
    """

    seconds: int = Field(default=0, description="Seconds since the Unix epoch")
    nanos: int = Field(default=0, description="Sub-second fraction in nanoseconds")


class Book(BaseModel):
    """Book as it travels in requests and responses.

    ``id`` is assigned by the store on create and ignored on create input.
    """

    id: int = Field(default=0, ge=ID_MIN, le=ID_MAX, description="Store-assigned identifier")
    title: str = Field(description="Title")
    author: str = Field(description="Author")
    publisher: str = Field(description="Publisher")
    publish_date: Timestamp | None = Field(default=None, description="Publication date")
    rating: float = Field(default=0.0, description="Rating")
    status: int = Field(default=0, ge=STATUS_MIN, le=STATUS_MAX, description="Status code")
