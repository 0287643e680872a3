"""Root conftest: makes the shared fixtures available to every test module."""

from tests.fixtures import *  # noqa: F401,F403
