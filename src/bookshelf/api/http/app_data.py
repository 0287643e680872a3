from dataclasses import dataclass

from src.bookshelf.core.services import BookService, DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    book_service: BookService
