from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.errors import DuplicateTableError, StorageFailureError
from ..domain.repositories import ReservationStore, TableCatalog
from ..models import DiningTable, Reservation

logger = logging.getLogger(__name__)


def _utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate SQLAlchemy faults into StorageFailureError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("storage failure while %s", action, exc_info=exc)
        raise StorageFailureError("storage unavailable") from exc


class SqlAlchemyTableCatalog(TableCatalog):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_number(self, number: int, *, for_update: bool = False) -> DiningTable | None:
        stmt = select(DiningTable).where(DiningTable.number == number)
        if for_update:
            stmt = stmt.with_for_update()
        with storage_errors("looking up table by number"):
            result = await self.session.scalar(stmt)
        return result if isinstance(result, DiningTable) else None

    async def get_by_id(self, table_id: str) -> DiningTable | None:
        with storage_errors("fetching table by id"):
            result = await self.session.scalar(select(DiningTable).where(DiningTable.id == table_id))
        return result if isinstance(result, DiningTable) else None

    async def list_all(self) -> List[DiningTable]:
        with storage_errors("listing tables"):
            rows = await self.session.scalars(select(DiningTable).order_by(DiningTable.number))
            return list(rows.all())

    async def create(
        self,
        *,
        table_id: str,
        number: int,
        places: int,
        is_vip: bool,
        min_order: float | None,
    ) -> DiningTable:
        table = DiningTable(
            id=table_id,
            number=number,
            places=places,
            is_vip=is_vip,
            min_order=min_order,
            created_at=_utc_now_naive(),
        )
        self.session.add(table)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateTableError("table id or number already exists") from exc
        except SQLAlchemyError as exc:
            logger.error("storage failure while creating table", exc_info=exc)
            raise StorageFailureError("storage unavailable") from exc
        return table


class SqlAlchemyReservationStore(ReservationStore):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_table_and_date(self, table_number: int, date: str) -> List[Reservation]:
        stmt: Select[tuple[Reservation]] = select(Reservation).where(
            Reservation.table_number == table_number,
            Reservation.date == date,
        )
        with storage_errors("scanning reservations for table and date"):
            rows = await self.session.scalars(stmt)
            return list(rows.all())

    async def insert(
        self,
        *,
        reservation_id: str,
        table_number: int,
        client_name: str,
        phone_number: str,
        date: str,
        slot_time_start: str,
        slot_time_end: str,
    ) -> Reservation:
        reservation = Reservation(
            id=reservation_id,
            table_number=table_number,
            client_name=client_name,
            phone_number=phone_number,
            date=date,
            slot_time_start=slot_time_start,
            slot_time_end=slot_time_end,
            created_at=_utc_now_naive(),
        )
        self.session.add(reservation)
        with storage_errors("inserting reservation"):
            await self.session.flush()
        return reservation

    async def list_all(
        self,
        *,
        table_number: Optional[int] = None,
        date: Optional[str] = None,
    ) -> List[Reservation]:
        stmt: Select[tuple[Reservation]] = select(Reservation)
        if table_number is not None:
            stmt = stmt.where(Reservation.table_number == table_number)
        if date is not None:
            stmt = stmt.where(Reservation.date == date)
        stmt = stmt.order_by(Reservation.date, Reservation.slot_time_start)
        with storage_errors("listing reservations"):
            rows = await self.session.scalars(stmt)
            return list(rows.all())
