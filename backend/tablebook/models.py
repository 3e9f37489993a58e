from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.sqltypes import BigInteger, Boolean, DateTime, Float, Integer, String


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class DiningTable(Base):
    """A restaurant table.

    ``id`` is the storage key; ``number`` is the business key that
    reservations refer to.
    """

    __tablename__ = "tables"
    __table_args__ = (
        UniqueConstraint("number", name="uq_tables_number"),
        CheckConstraint("places >= 1", name="chk_tables_places"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    places: Mapped[int] = mapped_column(Integer, nullable=False)
    is_vip: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    min_order: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (Index("idx_res_table_date", "table_number", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    # soft reference to tables.number, no foreign key
    table_number: Mapped[int] = mapped_column(Integer, nullable=False)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    slot_time_start: Mapped[str] = mapped_column(String(5), nullable=False)
    slot_time_end: Mapped[str] = mapped_column(String(5), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
