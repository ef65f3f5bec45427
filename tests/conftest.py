"""Shared fixtures."""

import pytest

from training_tracker.db import Database
from training_tracker.db import database as database_module
from training_tracker.journal import TrainingJournal


@pytest.fixture
def db():
    """In-memory database with the schema created."""
    database = Database("sqlite://")
    database.create_tables()
    yield database
    database.close()


@pytest.fixture
def journal(db):
    return TrainingJournal(db)


@pytest.fixture
def global_db(db, monkeypatch):
    """Make get_db() return the in-memory database."""
    monkeypatch.setattr(database_module, "_db", db)
    return db
