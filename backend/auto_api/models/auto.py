"""
Auto aggregate models: Auto, Engine, Repair, AutoFile.

Auto owns its Engine (1:1), its Repairs (1:N) and an optional AutoFile (1:1).
The child rows reference the Auto through auto_id; the back-references exist
only for that foreign-key mapping.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Date,
    Enum,
    ForeignKey,
    Integer,
    LargeBinary,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import AutoCategory, Limits, SafetyFeature
from .base import Base, IdType, TimestampMixin


class Auto(TimestampMixin, Base):
    """
    Vehicle, the root of the aggregate.

    version is the optimistic-lock counter: 0 on insert, +1 on every flushed
    UPDATE. SQLAlchemy adds "AND version = :loaded" to each UPDATE and raises
    StaleDataError when no row matched.
    """

    __tablename__ = "auto"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    chassis_number: Mapped[str] = mapped_column(
        String(Limits.MAX_CHASSIS_NUMBER_LENGTH), unique=True, nullable=False, index=True
    )
    make: Mapped[str] = mapped_column(String(Limits.MAX_MAKE_LENGTH), nullable=False)
    model: Mapped[str] = mapped_column(String(Limits.MAX_MODEL_LENGTH), nullable=False)
    model_year: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[Optional[AutoCategory]] = mapped_column(
        Enum(AutoCategory, name="auto_category", native_enum=False, length=16)
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    # Comma-separated codes, e.g. "ABS,AIRBAG"
    safety_features: Mapped[Optional[str]] = mapped_column(String(128))

    engine: Mapped["Engine"] = relationship(
        back_populates="auto", uselist=False, cascade="all, delete-orphan"
    )
    repairs: Mapped[list["Repair"]] = relationship(
        back_populates="auto", cascade="all, delete-orphan", order_by="Repair.id"
    )
    file: Mapped[Optional["AutoFile"]] = relationship(back_populates="auto", uselist=False)

    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": lambda v: 0 if v is None else v + 1,
    }

    @property
    def safety_feature_list(self) -> list[str]:
        if not self.safety_features:
            return []
        return [f for f in self.safety_features.split(SafetyFeature.SEPARATOR) if f]

    @safety_feature_list.setter
    def safety_feature_list(self, features: list[str] | None) -> None:
        self.safety_features = SafetyFeature.SEPARATOR.join(features) if features else None


class Engine(Base):
    """Engine of exactly one Auto. Deleted before its Auto."""

    __tablename__ = "engine"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(Limits.MAX_ENGINE_NAME_LENGTH), nullable=False, index=True)
    horsepower: Mapped[int] = mapped_column(Integer, nullable=False)
    cylinders: Mapped[int] = mapped_column(Integer, nullable=False)
    # Scale 3 keeps 1500.8 exact; precision covers up to 9999.999
    rated_speed: Mapped[Decimal] = mapped_column(Numeric(7, 3), nullable=False)
    auto_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("auto.id"), unique=True, nullable=False
    )

    auto: Mapped["Auto"] = relationship(back_populates="engine")


class Repair(Base):
    """Repair record of an Auto."""

    __tablename__ = "repair"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    mechanic: Mapped[str] = mapped_column(String(Limits.MAX_MECHANIC_LENGTH), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    auto_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("auto.id"), nullable=False, index=True
    )

    auto: Mapped["Auto"] = relationship(back_populates="repairs")


class AutoFile(Base):
    """Binary attachment of an Auto (at most one per Auto)."""

    __tablename__ = "auto_file"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    mimetype: Mapped[Optional[str]] = mapped_column(String(255))
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    auto_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("auto.id"), unique=True, nullable=False
    )

    auto: Mapped["Auto"] = relationship(back_populates="file")
