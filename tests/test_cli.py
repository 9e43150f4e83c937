from datetime import date

import pytest

from libdesk.cli import BOOK_HEADERS, LOAN_HEADERS, build_parser, format_table, main
from libdesk.library import Library


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "catalogue.db")


def run(db, *args):
    return main(["--db", db, *args])


@pytest.fixture
def stocked(db):
    assert run(db, "add-author", "Leo", "Tolstoy") == 0
    assert run(db, "add-category", "Novel") == 0
    assert run(db, "add-book", "War and Peace", "Leo Tolstoy", "Novel", "2") == 0
    assert run(db, "add-user", "Anna", "Reader", "C-1") == 0
    return db


def test_format_table_aligns_columns():
    text = format_table(["a", "bb"], [["xxx", "y"], ["z", "wwww"]])
    lines = text.splitlines()
    assert len(lines) == 4
    assert len({len(line) for line in lines}) == 1
    assert lines[0].startswith("a")
    assert set(lines[1]) <= {"-", "+"}


def test_format_table_rejects_ragged_rows():
    with pytest.raises(ValueError):
        format_table(["a", "b"], [["only one"]])


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_parser_defaults_count_to_zero():
    args = build_parser().parse_args(["add-book", "T", "A B", "C"])
    assert args.count == 0
    assert args.db == "library.db"


def test_books_command_lists_headers_and_rows(stocked, capsys):
    capsys.readouterr()
    assert run(stocked, "books") == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    for header in BOOK_HEADERS:
        assert header in lines[0]
    assert "War and Peace" in lines[2]
    assert "Leo Tolstoy" in lines[2]


def test_users_command(stocked, capsys):
    capsys.readouterr()
    assert run(stocked, "users") == 0
    out = capsys.readouterr().out
    assert "C-1" in out
    assert "Anna Reader" in out


def test_issue_and_return_round_trip(stocked, capsys):
    assert run(stocked, "issue", "War and Peace", "Leo Tolstoy", "C-1") == 0
    with Library(stocked) as lib:
        assert lib.books()[0].availability_count == 1
    capsys.readouterr()
    assert run(stocked, "loans") == 0
    out = capsys.readouterr().out
    assert LOAN_HEADERS[4] in out
    assert date.today().isoformat() in out

    assert run(stocked, "return", "C-1", "War and Peace", "Leo Tolstoy") == 0
    assert "Книга успешно возвращена." in capsys.readouterr().out
    with Library(stocked) as lib:
        assert lib.books()[0].availability_count == 2
        assert lib.loans()[0][5] == date.today()


def test_issue_unknown_card_fails(stocked, capsys):
    capsys.readouterr()
    assert run(stocked, "issue", "War and Peace", "Leo Tolstoy", "nobody") == 1
    assert "Не удалось выдать книгу." in capsys.readouterr().err


def test_return_without_loan_fails(stocked, capsys):
    capsys.readouterr()
    assert run(stocked, "return", "C-1", "War and Peace", "Leo Tolstoy") == 1
    assert "Не удалось вернуть книгу." in capsys.readouterr().err


def test_add_book_negative_count_fails(stocked, capsys):
    capsys.readouterr()
    assert run(stocked, "add-book", "Anna Karenina", "Leo Tolstoy", "Novel", "-1") == 1
    assert "Не удалось добавить книгу." in capsys.readouterr().err
    with Library(stocked) as lib:
        assert len(lib.books()) == 1


def test_add_book_empty_title_does_nothing(stocked, capsys):
    capsys.readouterr()
    assert run(stocked, "add-book", "", "Leo Tolstoy", "Novel", "3") == 0
    assert capsys.readouterr().out == ""
    with Library(stocked) as lib:
        assert len(lib.books()) == 1


def test_delete_book_and_user(stocked):
    assert run(stocked, "delete-book", "War and Peace", "Leo Tolstoy") == 0
    assert run(stocked, "delete-user", "C-1") == 0
    with Library(stocked) as lib:
        assert lib.books() == []
        assert lib.users() == []


def test_duplicate_card_fails(stocked, capsys):
    capsys.readouterr()
    assert run(stocked, "add-user", "Other", "Person", "C-1") == 1
    assert "Не удалось добавить пользователя." in capsys.readouterr().err


def test_unopenable_database_fails(tmp_path, capsys):
    missing = str(tmp_path / "no" / "such" / "dir" / "x.db")
    assert main(["--db", missing, "books"]) == 1
    assert "Ошибка подключения к базе данных" in capsys.readouterr().err