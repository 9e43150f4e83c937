# libdesk

libdesk keeps a small lending library in a single SQLite file. It stores:

- authors and categories
- books, each with its author, its category and the number of copies on the shelf
- readers and their card numbers
- every loan, with the date it was issued and the date it came back

## Install

    pip install .

To run the test suite:

    pip install ".[test]"
    pytest

## Command line

The `libdesk` command runs one action against a database file and then exits. The file
is `library.db` in the current directory unless you pass `--db PATH`. The schema is
created the first time the file is opened.

    libdesk --help

| Subcommand | Arguments | Action |
|---|---|---|
| `books` | | list books: title, author, category, copies available |
| `users` | | list readers: card number, name |
| `loans` | | list all loans: card, reader, title, author, issue date, return date |
| `add-author` | `first_name last_name` | add an author |
| `add-category` | `name` | add a category |
| `add-book` | `title author category [count]` | add a book; `count` defaults to 0 |
| `delete-book` | `title author` | delete the books with this title and author |
| `issue` | `title author card_number` | lend one copy to a reader |
| `return` | `card_number title author` | take back a reader's open loan |
| `add-user` | `first_name last_name card_number` | add a reader |
| `delete-user` | `card_number` | delete a reader |

Pass the author as one argument in the form "First Last", for example
`libdesk add-book Solaris "Stanislaw Lem" "Science fiction" 2`. The author and the
category must already be in the database.

Listings are printed as plain text tables. Status messages and table headings are in
Russian. When an action succeeds the command prints a confirmation and exits with 0.
When it fails the command prints an error to stderr and exits with 1. `add-book` with
an empty title does nothing. The delete commands report success even if nothing
matched.

## From Python

```python
from libdesk.library import connect
from libdesk.models import Book, User, UnavailableError

with connect("library.db") as lib:
    lib.add_author("Stanislaw", "Lem")
    lib.add_category("Science fiction")
    lib.add_book(Book("Solaris", "Stanislaw Lem", "Science fiction", 2))
    lib.add_user(User("Anna", "Ivanova", "A-001"))

    loan_id = lib.issue_book(Book("Solaris", "Stanislaw Lem"), "A-001")
    for book in lib.books():
        print(book)

    lib.return_book("A-001", Book("Solaris", "Stanislaw Lem"))
    print(lib.loans())
```

Methods of `Library` in `libdesk.library`. `connect(path)` returns the same object as
`Library(path)`.

- `add_author`, `add_category`, `add_book` and `add_user` return the id of the new row.
  `add_book` looks up the author and the category by name.
- `get_author_id("First Last")` and `get_category_id(name)` return an id, or `None`.
- `delete_book(book)` and `delete_user(card_number)` return the number of rows removed.
- `issue_book(book, card_number)` records a loan dated today, takes one copy off the
  shelf and returns the loan id.
- `return_book(card_number, book)` closes the reader's oldest open loan of that book,
  puts the copy back and returns the loan id.
- `books()` returns `Book` objects and `users()` returns `User` objects.
- `loans()` returns tuples `(card, reader, title, author, loan_date, return_date)`.
  The two dates are `datetime.date` objects. `return_date` is `None` while the book is
  still out.
- `create_schema()` creates any missing tables. Opening a database already does this.

A book is identified by its title and its author together.

Every failed operation raises `LibraryError` from `libdesk.models`, or one of its
subclasses:

- `NotFoundError` when the author, category, book, reader or open loan does not exist.
- `UnavailableError` when no copies are left to issue.

Database errors, such as a duplicate card number, are raised as `LibraryError`.

`Book` and `User` are frozen dataclasses. A `Book` raises `ValueError` if its number of
copies is negative. `Book.with_availability(count)` returns a copy of the book with a
new count.

## What it does not do

libdesk works only with a local SQLite file. It cannot connect to a database server.
It has no graphical or interactive interface, so each command performs one action and
exits. There is no command to list authors or categories, and none to delete them.