"""Command-line front end for the library catalogue."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Callable, Iterable, Optional, Sequence

from .library import Library, connect
from .models import Book, LibraryError, User

BOOK_HEADERS = ("Название", "Автор", "Категория", "Доступно")
USER_HEADERS = ("Номер карточки", "Пользователь")
LOAN_HEADERS = (
    "Номер карточки",
    "Пользователь",
    "Книга",
    "Автор",
    "Дата выдачи",
    "Дата возврата",
)

DEFAULT_DB = "library.db"


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def format_table(headers: Sequence[Any], rows: Iterable[Sequence[Any]]) -> str:
    """Render rows under headers as an aligned plain-text table."""
    header = [_cell(value) for value in headers]
    body = []
    for row in rows:
        cells = [_cell(value) for value in row]
        if len(cells) != len(header):
            raise ValueError(
                f"row has {len(cells)} cells, expected {len(header)}: {cells!r}"
            )
        body.append(cells)
    table = [header, *body]
    widths = [max(map(len, column)) for column in zip(*table)]

    def render(cells: Sequence[str]) -> str:
        return " | ".join(cell.ljust(width) for cell, width in zip(cells, widths))

    separator = "-+-".join("-" * width for width in widths)
    return "\n".join([render(header), separator, *map(render, body)])


def _view_books(lib: Library, args: argparse.Namespace) -> str:
    rows = (
        (b.title, b.author, b.category, b.availability_count) for b in lib.books()
    )
    return format_table(BOOK_HEADERS, rows)


def _view_users(lib: Library, args: argparse.Namespace) -> str:
    rows = (
        (u.card_number, f"{u.first_name} {u.last_name}") for u in lib.users()
    )
    return format_table(USER_HEADERS, rows)


def _view_loans(lib: Library, args: argparse.Namespace) -> str:
    return format_table(LOAN_HEADERS, lib.loans())


def _add_author(lib: Library, args: argparse.Namespace) -> str:
    lib.add_author(args.first_name, args.last_name)
    return "Автор успешно добавлен."


def _add_category(lib: Library, args: argparse.Namespace) -> str:
    lib.add_category(args.name)
    return "Категория успешно добавлена."


def _add_book(lib: Library, args: argparse.Namespace) -> str:
    if not args.title:
        return ""
    lib.add_book(Book(args.title, args.author, args.category, args.count))
    return "Книга успешно добавлена."


def _delete_book(lib: Library, args: argparse.Namespace) -> str:
    lib.delete_book(Book(args.title, args.author))
    return "Книга успешно удалена."


def _issue_book(lib: Library, args: argparse.Namespace) -> str:
    lib.issue_book(Book(args.title, args.author), args.card_number)
    return "Книга успешно выдана."


def _return_book(lib: Library, args: argparse.Namespace) -> str:
    lib.return_book(args.card_number, Book(args.title, args.author))
    return "Книга успешно возвращена."


def _add_user(lib: Library, args: argparse.Namespace) -> str:
    lib.add_user(User(args.first_name, args.last_name, args.card_number))
    return "Пользователь успешно добавлен."


def _delete_user(lib: Library, args: argparse.Namespace) -> str:
    lib.delete_user(args.card_number)
    return "Пользователь успешно удален."


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per catalogue action."""
    parser = argparse.ArgumentParser(
        prog="libdesk", description="Manage a library catalogue."
    )
    parser.add_argument(
        "--db", default=DEFAULT_DB, help=f"database file (default: {DEFAULT_DB})"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    def command(
        name: str,
        handler: Callable[[Library, argparse.Namespace], str],
        failure: str,
        help_text: str,
    ) -> argparse.ArgumentParser:
        sub = commands.add_parser(name, help=help_text)
        sub.set_defaults(run=handler, failure=failure)
        return sub

    command("books", _view_books, "Не удалось получить список книг.", "list books")
    command(
        "users", _view_users, "Не удалось получить список пользователей.", "list readers"
    )
    command("loans", _view_loans, "Не удалось получить учёт книг.", "list loans")

    sub = command(
        "add-author", _add_author, "Не удалось добавить автора.", "add an author"
    )
    sub.add_argument("first_name")
    sub.add_argument("last_name")

    sub = command(
        "add-category", _add_category, "Не удалось добавить категорию.", "add a category"
    )
    sub.add_argument("name")

    sub = command("add-book", _add_book, "Не удалось добавить книгу.", "add a book")
    sub.add_argument("title")
    sub.add_argument("author", help='author as "First Last"')
    sub.add_argument("category")
    sub.add_argument("count", type=int, nargs="?", default=0)

    sub = command(
        "delete-book", _delete_book, "Не удалось удалить книгу.", "delete a book"
    )
    sub.add_argument("title")
    sub.add_argument("author")

    sub = command("issue", _issue_book, "Не удалось выдать книгу.", "lend a book")
    sub.add_argument("title")
    sub.add_argument("author")
    sub.add_argument("card_number")

    sub = command(
        "return", _return_book, "Не удалось вернуть книгу.", "take a book back"
    )
    sub.add_argument("card_number")
    sub.add_argument("title")
    sub.add_argument("author")

    sub = command(
        "add-user", _add_user, "Не удалось добавить пользователя.", "add a reader"
    )
    sub.add_argument("first_name")
    sub.add_argument("last_name")
    sub.add_argument("card_number")

    sub = command(
        "delete-user",
        _delete_user,
        "Не удалось удалить пользователя.",
        "delete a reader",
    )
    sub.add_argument("card_number")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one catalogue command; return the process exit status."""
    args = build_parser().parse_args(argv)
    try:
        lib = connect(args.db)
    except LibraryError as exc:
        print(f"Ошибка подключения к базе данных: {exc}", file=sys.stderr)
        return 1
    with lib:
        try:
            output = args.run(lib, args)
        except (LibraryError, ValueError) as exc:
            print(args.failure, file=sys.stderr)
            print(exc, file=sys.stderr)
            return 1
    if output:
        print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())