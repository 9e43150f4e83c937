"""Lending-library records (authors, books, readers and loans) kept in SQLite."""

__version__ = "0.1.0"
__all__ = ["__version__"]