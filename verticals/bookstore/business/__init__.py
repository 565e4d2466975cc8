"""Bookstore business objects and their factories.

FACTORIES is the registration list of the API portal; every module of this
package also exposes its factory as ``factory`` for package discovery.
"""

from verticals.bookstore.business import book, book_list, book_view, books, find_bestseller
from verticals.bookstore.business.admin import book_list as admin_book_list

FACTORIES = [
    book.factory,
    books.factory,
    book_list.factory,
    admin_book_list.factory,
    book_view.factory,
    find_bestseller.factory,
]
