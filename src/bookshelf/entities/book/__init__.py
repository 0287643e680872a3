"""Entity package: Book."""

from .entity import Book, Timestamp
from .table import BookTable, book_table

__all__ = ["Book", "BookTable", "Timestamp", "book_table"]
