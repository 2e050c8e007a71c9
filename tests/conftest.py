"""
Pytest configuration for tablemodel tests.

Provides a mocked database library for unit tests of the model and a
SQLite-backed library for end-to-end tests.
"""

import sqlite3
from unittest.mock import MagicMock

import pytest

from tablemodel import Error, Library, ModelConfig, SQLiteLibrary


@pytest.fixture
def library():
    """Mocked library whose statements succeed."""
    mock = MagicMock(spec=Library)
    mock.insert.return_value = True
    mock.update.return_value = True
    mock.delete.return_value = True
    mock.last_error.return_value = Error(message="no such table: Users", query="INSERT INTO \"Users\"")
    return mock


@pytest.fixture
def config():
    """Config with automatic table naming disabled."""
    return ModelConfig(auto_table=False)


@pytest.fixture
def connection():
    """In-memory SQLite database with a users table."""
    conn = sqlite3.connect(":memory:")
    conn.executescript(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT UNIQUE,
            age INTEGER DEFAULT 0,
            deleted INTEGER DEFAULT 0,
            deleted_at TEXT
        );
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            total INTEGER NOT NULL
        );
        """
    )
    yield conn
    conn.close()


@pytest.fixture
def sqlite_library(connection):
    """SQLite library on the in-memory database."""
    return SQLiteLibrary(connection)
