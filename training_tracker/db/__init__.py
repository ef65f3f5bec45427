"""Database module for the Training Tracker tool."""

from .database import Database, get_db, close_db
from .models import TrainingSessionRecord

__all__ = ["Database", "get_db", "close_db", "TrainingSessionRecord"]
