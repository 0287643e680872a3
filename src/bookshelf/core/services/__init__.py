"""Core services exports."""

from .book_service import BookService
from .database.db_session import DbSessionService, connection_scope
from .timestamp_codec import decode_timestamp, encode_timestamp
from .version_guard import API_VERSION, check_api

__all__ = [
    "API_VERSION",
    "BookService",
    "DbSessionService",
    "check_api",
    "connection_scope",
    "decode_timestamp",
    "encode_timestamp",
]
