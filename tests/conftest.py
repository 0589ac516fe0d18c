"""Test configuration and fixtures for the bookstore API."""

from tests.fixtures import *  # noqa: F401,F403
