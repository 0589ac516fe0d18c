"""Bookstore API.

A FastAPI service exposing CRUD operations over the ``books`` table.
"""

__version__ = "0.1.0"
