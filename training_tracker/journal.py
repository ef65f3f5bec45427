"""Workout log: store, list, remove and summarize training sessions."""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import func

from .db import Database, get_db
from .db.models import TrainingSessionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingSession:
    """One logged workout."""
    id: uuid.UUID
    date: date
    type: str
    duration_minutes: int
    intensity: int
    notes: str

    @property
    def date_formatted(self) -> str:
        return self.date.strftime("%d.%m.%Y")


@dataclass(frozen=True)
class TrainingStatistics:
    """Aggregates over the whole log."""
    total_sessions: int
    total_minutes: int
    average_duration_minutes: float
    average_intensity: float
    most_popular_workout: Optional[str]
    last_week_sessions: int


class TrainingJournal:
    """CRUD access to the training_sessions table."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or get_db()

    def get_sessions(self) -> List[TrainingSession]:
        """Get all sessions, newest first."""
        with self.db.get_session() as session:
            records = session.query(TrainingSessionRecord).order_by(
                TrainingSessionRecord.date.desc()
            ).all()
            return [self._to_session(record) for record in records]

    def add_session(
        self,
        session_date: date,
        workout_type: str,
        duration: int,
        intensity: int,
        notes: str = "",
    ) -> TrainingSession:
        """Store a new session and return it.

        Workout type and notes are trimmed and the duration is raised to at
        least one minute.
        """
        training_session = TrainingSession(
            id=uuid.uuid4(),
            date=session_date,
            type=workout_type.strip(),
            duration_minutes=max(1, duration),
            intensity=intensity,
            notes=(notes or "").strip(),
        )

        with self.db.get_session() as session:
            session.add(TrainingSessionRecord(
                id=str(training_session.id),
                date=training_session.date,
                type=training_session.type,
                duration=training_session.duration_minutes,
                intensity=training_session.intensity,
                notes=training_session.notes,
            ))

        logger.info(f"Logged {training_session.type} session on {training_session.date} ({training_session.id})")
        return training_session

    def remove_session(self, session_id: uuid.UUID) -> bool:
        """Delete a session. Returns True if it existed."""
        with self.db.get_session() as session:
            deleted = session.query(TrainingSessionRecord).filter(
                TrainingSessionRecord.id == str(session_id)
            ).delete()

        if deleted:
            logger.info(f"Removed session {session_id}")
        return deleted > 0

    def build_statistics(self, today: Optional[date] = None) -> TrainingStatistics:
        """Calculate totals, averages, favourite workout and last week's count."""
        today = today or date.today()
        threshold = today - timedelta(days=7)

        with self.db.get_session() as session:
            total_sessions, total_minutes, avg_duration, avg_intensity = session.query(
                func.count(TrainingSessionRecord.id),
                func.coalesce(func.sum(TrainingSessionRecord.duration), 0),
                func.coalesce(func.avg(TrainingSessionRecord.duration), 0),
                func.coalesce(func.avg(TrainingSessionRecord.intensity), 0),
            ).one()

            most_popular = None
            if total_sessions > 0:
                most_popular = session.query(TrainingSessionRecord.type).filter(
                    func.trim(TrainingSessionRecord.type) != ""
                ).group_by(
                    TrainingSessionRecord.type
                ).order_by(
                    func.count(TrainingSessionRecord.id).desc()
                ).limit(1).scalar()

            last_week_sessions = session.query(TrainingSessionRecord).filter(
                TrainingSessionRecord.date >= threshold
            ).count()

        return TrainingStatistics(
            total_sessions=total_sessions,
            total_minutes=int(total_minutes),
            average_duration_minutes=float(avg_duration) if total_sessions else 0.0,
            average_intensity=float(avg_intensity) if total_sessions else 0.0,
            most_popular_workout=most_popular,
            last_week_sessions=last_week_sessions,
        )

    @staticmethod
    def _to_session(record: TrainingSessionRecord) -> TrainingSession:
        return TrainingSession(
            id=uuid.UUID(record.id),
            date=record.date,
            type=record.type,
            duration_minutes=record.duration,
            intensity=record.intensity,
            notes=record.notes or "",
        )
