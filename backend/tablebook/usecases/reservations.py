import logging
import uuid
from typing import Callable

from ..domain.errors import OverlapConflictError, TableNotFoundError
from ..domain.repositories import ReservationStore, TableCatalog
from ..domain.services import ReservationRequest, find_conflict, validate_reservation_request
from ..models import Reservation

logger = logging.getLogger(__name__)


def new_reservation_id() -> str:
    return str(uuid.uuid4())


class ReservationAdmission:
    """Decides whether a reservation can be booked and persists it.

    Callers must run ``create_reservation`` inside one transaction: the table
    row is locked before existing reservations are read, so admissions for
    the same table number are serialized and cannot both pass the overlap
    check. Admissions for other tables are not blocked.
    """

    def __init__(
        self,
        tables: TableCatalog,
        reservations: ReservationStore,
        *,
        id_factory: Callable[[], str] = new_reservation_id,
    ) -> None:
        self._tables = tables
        self._reservations = reservations
        self._id_factory = id_factory

    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        window = validate_reservation_request(request)

        table = await self._tables.find_by_number(request.table_number, for_update=True)
        if table is None:
            logger.info("reservation rejected: table %s not found", request.table_number)
            raise TableNotFoundError(f"table {request.table_number} not found")

        existing = await self._reservations.find_by_table_and_date(request.table_number, request.date)
        conflict = find_conflict(window, existing)
        if conflict is not None:
            logger.info(
                "reservation rejected: table %s on %s %s-%s overlaps %s",
                request.table_number,
                request.date,
                request.slot_time_start,
                request.slot_time_end,
                conflict.id,
            )
            raise OverlapConflictError(conflict.id)

        return await self._reservations.insert(
            reservation_id=self._id_factory(),
            table_number=request.table_number,
            client_name=request.client_name,
            phone_number=request.phone_number,
            date=request.date,
            slot_time_start=request.slot_time_start,
            slot_time_end=request.slot_time_end,
        )


async def list_reservations(
    res_store: ReservationStore,
    *,
    table_number: int | None = None,
    date: str | None = None,
) -> list[Reservation]:
    return await res_store.list_all(table_number=table_number, date=date)
