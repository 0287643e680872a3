"""Bookshelf: versioned CRUD service over a relational book catalogue.

The service layer lives in ``core`` and ``entities``; ``api`` exposes it over
HTTP and ``runtime`` carries configuration.
"""

__version__ = "0.1.0"
