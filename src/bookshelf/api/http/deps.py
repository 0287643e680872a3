"""FastAPI dependencies for the HTTP gateway."""

from fastapi import HTTPException, Request

from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.core.services import BookService
from src.bookshelf.runtime.config.config_data import ConfigData


def get_app_config(request: Request) -> ConfigData:
    return request.app.state.config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    deps: ApplicationDependencies | None = getattr(
        request.app.state, "app_dependencies", None
    )
    if deps is None:
        raise HTTPException(status_code=503, detail="Service is not initialized")
    return deps


def get_book_service(request: Request) -> BookService:
    """The book service built at startup."""
    return get_app_dependencies(request).book_service


def get_call_timeout(request: Request) -> float | None:
    """Deadline applied to each gateway call."""
    return get_app_config(request).service.default_timeout
