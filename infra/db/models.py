"""Declarative models for darts scoring persistence."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class LegRecord(Base):
    """One side's view of a sealed leg."""

    __tablename__ = "legs"

    match_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    leg_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    side: Mapped[str] = mapped_column(String(8), primary_key=True)
    player_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    starting_score: Mapped[int] = mapped_column(Integer, nullable=False)
    final_score: Mapped[int] = mapped_column(Integer, nullable=False)
    won: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    darts: Mapped[list["DartThrowRecord"]] = relationship(
        back_populates="leg",
        cascade="all, delete-orphan",
        order_by="DartThrowRecord.position",
    )


class DartThrowRecord(Base):
    """Individual dart belonging to a leg row."""

    __tablename__ = "dart_throws"
    __table_args__ = (
        ForeignKeyConstraint(
            ["match_id", "leg_number", "side"],
            ["legs.match_id", "legs.leg_number", "legs.side"],
            ondelete="CASCADE",
        ),
        Index("ix_dart_throws_leg", "match_id", "leg_number", "side"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(String(64), nullable=False)
    leg_number: Mapped[int] = mapped_column(Integer, nullable=False)
    side: Mapped[str] = mapped_column(String(8), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    dart_id: Mapped[str] = mapped_column(String(64), nullable=False)
    turn_number: Mapped[int] = mapped_column(Integer, nullable=False)
    dart_number: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    running_score: Mapped[int] = mapped_column(Integer, nullable=False)
    is_double_attempt: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_checkout_attempt: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    checkout_successful: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_bust: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    thrown_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    player_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    leg: Mapped[LegRecord] = relationship(back_populates="darts")


class GameStatsRecord(Base):
    """Aggregated statistics of one side in one match."""

    __tablename__ = "game_stats"

    match_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    side: Mapped[str] = mapped_column(String(8), primary_key=True)
    player_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    player_name: Mapped[str] = mapped_column(String(255), nullable=False)
    game_won: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    legs_played: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    legs_won: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_darts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    average: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    three_dart_average: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    scores_80_plus: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    scores_100_plus: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    scores_140_plus: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    scores_180: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    double_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    double_hits: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    double_percentage: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    checkout_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    checkout_hits: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    checkout_percentage: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    highest_checkout: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    highest_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    finish_positions: Mapped[list[int]] = mapped_column(JSON, default=list, nullable=False)
    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class GameResultRecord(Base):
    """Final outcome of a match."""

    __tablename__ = "game_results"

    match_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    home_name: Mapped[str] = mapped_column(String(255), nullable=False)
    away_name: Mapped[str] = mapped_column(String(255), nullable=False)
    starting_score: Mapped[int] = mapped_column(Integer, nullable=False)
    leg_format: Mapped[str] = mapped_column(String(8), nullable=False)
    game_type: Mapped[str] = mapped_column(String(16), nullable=False)
    home_legs_won: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    away_legs_won: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    winner: Mapped[str | None] = mapped_column(String(8), nullable=True)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
