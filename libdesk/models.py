"""Value objects and errors shared by the library catalogue."""

from __future__ import annotations

from dataclasses import dataclass, replace


class LibraryError(Exception):
    """Raised when a library operation cannot be completed."""


class NotFoundError(LibraryError):
    """Raised when a book, author, category, user or loan does not exist."""


class UnavailableError(LibraryError):
    """Raised when a book has no copies left to lend."""


@dataclass(frozen=True)
class Book:
    """A catalogue entry: title, author ("First Last"), category and free copies."""

    title: str
    author: str
    category: str = ""
    availability_count: int = 0

    def __post_init__(self) -> None:
        if self.availability_count < 0:
            raise ValueError(
                f"availability_count must not be negative, got {self.availability_count}"
            )

    def with_availability(self, count: int) -> "Book":
        """Return a copy of this book with a different number of free copies."""
        return replace(self, availability_count=count)


@dataclass(frozen=True)
class User:
    """A library reader identified by a card number."""

    first_name: str
    last_name: str
    card_number: str