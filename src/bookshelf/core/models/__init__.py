from .book_messages import (
    CreateRequest,
    CreateResponse,
    DeleteRequest,
    DeleteResponse,
    ReadAllRequest,
    ReadAllResponse,
    ReadRequest,
    ReadResponse,
    UpdateRequest,
    UpdateResponse,
)

__all__ = [
    "CreateRequest",
    "CreateResponse",
    "DeleteRequest",
    "DeleteResponse",
    "ReadAllRequest",
    "ReadAllResponse",
    "ReadRequest",
    "ReadResponse",
    "UpdateRequest",
    "UpdateResponse",
]
