"""SQLAlchemy entity definitions for persons, pralines, participations and ratings."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Person(Base, TimestampMixin):
    __tablename__ = "persons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Person id={self.id} name={self.first_name} {self.last_name}>"


class Praline(Base, TimestampMixin):
    __tablename__ = "pralines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_vegan: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"), default=False)
    # Opaque reference into the asset store; never interpreted here.
    image_path: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Praline id={self.id} year={self.year} name={self.name}>"


class PersonYear(Base, TimestampMixin):
    """A person's participation record for one year; owns the signature."""

    __tablename__ = "person_years"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    person_id: Mapped[int] = mapped_column(Integer, ForeignKey("persons.id"), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    # Assigned once by the signature generator, never by the caller.
    signature: Mapped[str] = mapped_column(String(6), nullable=False, index=True)
    is_participating: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"), default=False)
    favorite_chocolate_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("pralines.id"))
    general_feedback: Mapped[Optional[str]] = mapped_column(Text)
    allergies: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("person_id", "year", name="person_year_unique"),
        UniqueConstraint("signature", "year", name="signature_year_unique"),
    )

    def __repr__(self) -> str:
        return f"<PersonYear id={self.id} person={self.person_id} year={self.year}>"


class Rating(Base, TimestampMixin):
    __tablename__ = "ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    person_year_id: Mapped[int] = mapped_column(Integer, ForeignKey("person_years.id"), nullable=False, index=True)
    praline_id: Mapped[int] = mapped_column(Integer, ForeignKey("pralines.id"), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("person_year_id", "praline_id", name="person_year_praline_unique"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Rating person_year={self.person_year_id} praline={self.praline_id} rating={self.rating}>"


__all__ = ["Base", "Person", "PersonYear", "Praline", "Rating"]
