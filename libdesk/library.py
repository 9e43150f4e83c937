"""Catalogue storage: books, readers and loans kept in an SQLite database."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import date
from os import PathLike
from typing import Iterator, Optional, Union

from .models import Book, LibraryError, NotFoundError, UnavailableError, User

_SCHEMA = """
CREATE TABLE IF NOT EXISTS authors (
    author_id INTEGER PRIMARY KEY,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS categories (
    category_id INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS books (
    book_id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    author_id INTEGER NOT NULL REFERENCES authors (author_id),
    category_id INTEGER NOT NULL REFERENCES categories (category_id),
    availability_count INTEGER NOT NULL CHECK (availability_count >= 0)
);
CREATE TABLE IF NOT EXISTS users (
    user_id INTEGER PRIMARY KEY,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    library_card_number TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS book_loans (
    loan_id INTEGER PRIMARY KEY,
    book_id INTEGER NOT NULL REFERENCES books (book_id),
    user_id INTEGER NOT NULL REFERENCES users (user_id),
    loan_date TEXT NOT NULL,
    return_date TEXT
);
"""

_AUTHOR_BY_NAME = (
    "SELECT author_id FROM authors WHERE first_name || ' ' || last_name = ?"
)

_FIND_BOOK = (
    "SELECT book_id, availability_count FROM books WHERE title = ? AND author_id = "
    f"({_AUTHOR_BY_NAME})"
)

_BOOKS = (
    "SELECT b.title, a.first_name || ' ' || a.last_name AS author, "
    "c.name AS category, b.availability_count FROM books b "
    "JOIN authors a ON b.author_id = a.author_id "
    "JOIN categories c ON b.category_id = c.category_id "
    "ORDER BY b.book_id"
)

_LOANS = (
    "SELECT u.library_card_number, u.first_name || ' ' || u.last_name AS user, "
    "b.title, a.first_name || ' ' || a.last_name AS author, "
    "bl.loan_date, bl.return_date FROM book_loans bl "
    "JOIN books b ON bl.book_id = b.book_id "
    "JOIN authors a ON b.author_id = a.author_id "
    "JOIN users u ON bl.user_id = u.user_id "
    "ORDER BY bl.loan_id"
)

PathType = Union[str, "PathLike[str]"]


class Library:
    """A library catalogue stored in an SQLite database file."""

    def __init__(self, path: PathType) -> None:
        try:
            self._conn = sqlite3.connect(path)
            self._conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as exc:
            raise LibraryError(f"cannot open database: {exc}") from exc
        self.create_schema()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> "Library":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            with self._conn:
                yield self._conn
        except sqlite3.Error as exc:
            raise LibraryError(str(exc)) from exc

    def create_schema(self) -> None:
        """Create the catalogue tables if they do not exist yet."""
        try:
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise LibraryError(str(exc)) from exc

    def add_author(self, first_name: str, last_name: str) -> int:
        """Store an author and return its id."""
        with self._transaction() as conn:
            cur = conn.execute(
                "INSERT INTO authors (first_name, last_name) VALUES (?, ?)",
                (first_name, last_name),
            )
            return cur.lastrowid

    def add_category(self, name: str) -> int:
        """Store a category and return its id."""
        with self._transaction() as conn:
            cur = conn.execute("INSERT INTO categories (name) VALUES (?)", (name,))
            return cur.lastrowid

    def get_author_id(self, author: str) -> Optional[int]:
        """Return the id of the author named "First Last", or None."""
        with self._transaction() as conn:
            row = conn.execute(_AUTHOR_BY_NAME, (author,)).fetchone()
        return None if row is None else row[0]

    def get_category_id(self, category: str) -> Optional[int]:
        """Return the id of the named category, or None."""
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT category_id FROM categories WHERE name = ?", (category,)
            ).fetchone()
        return None if row is None else row[0]

    def add_book(self, book: Book) -> int:
        """Store a book under an existing author and category; return its id."""
        author_id = self.get_author_id(book.author)
        if author_id is None:
            raise NotFoundError(f"author {book.author!r} not found")
        category_id = self.get_category_id(book.category)
        if category_id is None:
            raise NotFoundError(f"category {book.category!r} not found")
        with self._transaction() as conn:
            cur = conn.execute(
                "INSERT INTO books (title, author_id, category_id, availability_count) "
                "VALUES (?, ?, ?, ?)",
                (book.title, author_id, category_id, book.availability_count),
            )
            return cur.lastrowid

    def delete_book(self, book: Book) -> int:
        """Delete books matching title and author; return how many were removed."""
        with self._transaction() as conn:
            cur = conn.execute(
                f"DELETE FROM books WHERE title = ? AND author_id = ({_AUTHOR_BY_NAME})",
                (book.title, book.author),
            )
            return cur.rowcount

    def add_user(self, user: User) -> int:
        """Store a reader and return its id; card numbers must be unique."""
        with self._transaction() as conn:
            cur = conn.execute(
                "INSERT INTO users (first_name, last_name, library_card_number) "
                "VALUES (?, ?, ?)",
                (user.first_name, user.last_name, user.card_number),
            )
            return cur.lastrowid

    def delete_user(self, card_number: str) -> int:
        """Delete the reader with this card; return how many rows were removed."""
        with self._transaction() as conn:
            cur = conn.execute(
                "DELETE FROM users WHERE library_card_number = ?", (card_number,)
            )
            return cur.rowcount

    @staticmethod
    def _user_id(conn: sqlite3.Connection, card_number: str) -> int:
        row = conn.execute(
            "SELECT user_id FROM users WHERE library_card_number = ?", (card_number,)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"no user with card number {card_number!r}")
        return row[0]

    def issue_book(self, book: Book, card_number: str) -> int:
        """Lend one copy of a book to a reader; return the loan id."""
        with self._transaction() as conn:
            row = conn.execute(_FIND_BOOK, (book.title, book.author)).fetchone()
            if row is None:
                raise NotFoundError(f"book {book.title!r} by {book.author!r} not found")
            book_id, available = row
            if available <= 0:
                raise UnavailableError(f"no copies of {book.title!r} are available")
            user_id = self._user_id(conn, card_number)
            cur = conn.execute(
                "INSERT INTO book_loans (book_id, user_id, loan_date) VALUES (?, ?, ?)",
                (book_id, user_id, date.today().isoformat()),
            )
            conn.execute(
                "UPDATE books SET availability_count = availability_count - 1 "
                "WHERE book_id = ?",
                (book_id,),
            )
            return cur.lastrowid

    def return_book(self, card_number: str, book: Book) -> int:
        """Close a reader's open loan of a book; return the loan id."""
        with self._transaction() as conn:
            user_id = self._user_id(conn, card_number)
            row = conn.execute(_FIND_BOOK, (book.title, book.author)).fetchone()
            if row is None:
                raise NotFoundError(f"book {book.title!r} by {book.author!r} not found")
            book_id = row[0]
            loan = conn.execute(
                "SELECT loan_id FROM book_loans WHERE book_id = ? AND user_id = ? "
                "AND return_date IS NULL ORDER BY loan_id",
                (book_id, user_id),
            ).fetchone()
            if loan is None:
                raise NotFoundError(
                    f"{book.title!r} is not on loan to card {card_number!r}"
                )
            loan_id = loan[0]
            conn.execute(
                "UPDATE book_loans SET return_date = ? WHERE loan_id = ?",
                (date.today().isoformat(), loan_id),
            )
            conn.execute(
                "UPDATE books SET availability_count = availability_count + 1 "
                "WHERE book_id = ?",
                (book_id,),
            )
            return loan_id

    def books(self) -> list[Book]:
        """Return every book with its author, category and free copies."""
        with self._transaction() as conn:
            rows = conn.execute(_BOOKS).fetchall()
        return [Book(*row) for row in rows]

    def users(self) -> list[User]:
        """Return every registered reader."""
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT first_name, last_name, library_card_number FROM users "
                "ORDER BY user_id"
            ).fetchall()
        return [User(*row) for row in rows]

    def loans(self) -> list[tuple]:
        """Return loans as (card, reader, title, author, loan_date, return_date)."""
        with self._transaction() as conn:
            rows = conn.execute(_LOANS).fetchall()
        return [
            (
                card,
                reader,
                title,
                author,
                date.fromisoformat(loaned),
                None if returned is None else date.fromisoformat(returned),
            )
            for card, reader, title, author, loaned, returned in rows
        ]


def connect(path: PathType) -> Library:
    """Open (and if needed initialise) the catalogue database at path."""
    return Library(path)