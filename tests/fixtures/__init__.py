"""Shared pytest fixtures for the bookstore tests."""

from .core import *  # noqa: F401,F403
