"""Request and response envelopes of the v1 book service contract."""

from pydantic import BaseModel, Field

from src.bookshelf.entities.book.entity import ID_MAX, ID_MIN, Book


class CreateRequest(BaseModel):
    api: str = ""
    book: Book


class CreateResponse(BaseModel):
    api: str
    id: int


class ReadRequest(BaseModel):
    api: str = ""
    id: int = Field(ge=ID_MIN, le=ID_MAX)


class ReadResponse(BaseModel):
    api: str
    book: Book


class UpdateRequest(BaseModel):
    api: str = ""
    book: Book


class UpdateResponse(BaseModel):
    api: str
    updated: int


class DeleteRequest(BaseModel):
    api: str = ""
    id: int = Field(ge=ID_MIN, le=ID_MAX)


class DeleteResponse(BaseModel):
    api: str
    deleted: int


class ReadAllRequest(BaseModel):
    api: str = ""


class ReadAllResponse(BaseModel):
    api: str
    books: list[Book] = Field(default_factory=list)
