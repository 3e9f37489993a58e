from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_user_id, get_session
from ..domain.errors import (
    InvalidRequestError,
    OverlapConflictError,
    StorageFailureError,
    TableNotFoundError,
)
from ..infrastructure.repositories import SqlAlchemyReservationStore, SqlAlchemyTableCatalog
from ..schemas import ReservationCreate, ReservationCreated, ReservationList, ReservationRead
from ..usecases import reservations as reservation_usecase
from ..utils.audit_log import emit_audit_log

router = APIRouter(prefix="/reservations", tags=["reservations"], dependencies=[Depends(get_current_user_id)])


def _storage_unavailable() -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage unavailable")


@router.post("", response_model=ReservationCreated, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: ReservationCreate,
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> ReservationCreated:
    request = payload.to_request()
    admission = reservation_usecase.ReservationAdmission(
        SqlAlchemyTableCatalog(session),
        SqlAlchemyReservationStore(session),
    )
    try:
        async with session.begin():
            reservation = await admission.create_reservation(request)
            try:
                emit_audit_log(
                    action="reservation.created",
                    initiator="user",
                    entity_id=reservation.id,
                    user_id=user_id,
                    table_number=reservation.table_number,
                    date=reservation.date,
                    slot_time_start=reservation.slot_time_start,
                    slot_time_end=reservation.slot_time_end,
                )
            except RuntimeError as exc:
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="failed to record reservation",
                ) from exc
    except InvalidRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except TableNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found") from exc
    except OverlapConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Reservation overlaps with existing reservation",
        ) from exc
    except (StorageFailureError, SQLAlchemyError) as exc:
        raise _storage_unavailable() from exc

    return ReservationCreated(reservation_id=reservation.id)


@router.get("", response_model=ReservationList)
async def list_reservations(
    table_number: Optional[int] = Query(default=None, alias="tableNumber", ge=1),
    date: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_session),
) -> ReservationList:
    res_store = SqlAlchemyReservationStore(session)
    try:
        rows = await reservation_usecase.list_reservations(res_store, table_number=table_number, date=date)
    except StorageFailureError as exc:
        raise _storage_unavailable() from exc
    return ReservationList(reservations=[ReservationRead.from_db(reservation=row) for row in rows])
