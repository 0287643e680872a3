"""API version sanity check applied at the start of every operation."""

from src.bookshelf.core.errors import unimplemented

API_VERSION = "v1"


def check_api(requested: str | None, implemented: str = API_VERSION) -> None:
    """Reject requests declaring a contract version other than ``implemented``.

    An empty or missing version means the caller opted out of the check.
    """
    if requested and requested != implemented:
        raise unimplemented(
            "unsupported API version: "
            f"implemented API version '{implemented}', requested version '{requested}'"
        )
