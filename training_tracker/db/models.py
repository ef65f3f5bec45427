"""Database models for the workout log."""

from sqlalchemy import Column, Integer, String, Date, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TrainingSessionRecord(Base):
    """Logged training session."""

    __tablename__ = "training_sessions"

    id = Column(String(36), primary_key=True)  # UUID as text
    date = Column(Date, nullable=False)
    type = Column(String(100), nullable=False)  # Run, Strength, Swim, etc.
    duration = Column(Integer, nullable=False)  # minutes
    intensity = Column(Integer, nullable=False)  # 1-10
    notes = Column(Text)

    def __repr__(self):
        return f"<TrainingSessionRecord(id={self.id}, date={self.date}, type={self.type})>"
