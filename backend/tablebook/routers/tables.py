from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_user_id, get_session
from ..domain.errors import DuplicateTableError, InvalidRequestError, StorageFailureError
from ..infrastructure.repositories import SqlAlchemyTableCatalog
from ..schemas import TableCreate, TableCreated, TableList, TableRead
from ..usecases import tables as table_usecase
from ..utils.audit_log import emit_audit_log

router = APIRouter(prefix="/tables", tags=["tables"], dependencies=[Depends(get_current_user_id)])


@router.get("", response_model=TableList)
async def list_tables(session: AsyncSession = Depends(get_session)) -> TableList:
    catalog = SqlAlchemyTableCatalog(session)
    try:
        tables = await table_usecase.list_tables(catalog)
    except StorageFailureError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage unavailable") from exc
    return TableList(tables=[TableRead.from_db(table=table) for table in tables])


@router.post("", response_model=TableCreated, status_code=status.HTTP_201_CREATED)
async def create_table(
    payload: TableCreate,
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> TableCreated:
    catalog = SqlAlchemyTableCatalog(session)
    try:
        async with session.begin():
            table = await table_usecase.create_table(
                catalog,
                table_id=payload.id,
                number=payload.number,
                places=payload.places,
                is_vip=payload.is_vip,
                min_order=payload.min_order,
            )
            try:
                emit_audit_log(
                    action="table.created",
                    initiator="user",
                    entity_id=table.id,
                    user_id=user_id,
                    table_number=table.number,
                )
            except RuntimeError as exc:
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="failed to record table",
                ) from exc
    except InvalidRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DuplicateTableError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="table already exists") from exc
    except (StorageFailureError, SQLAlchemyError) as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage unavailable") from exc

    return TableCreated(id=table.id)


@router.get("/{table_id}", response_model=TableRead)
async def get_table(
    table_id: str = Path(..., min_length=1, max_length=64),
    session: AsyncSession = Depends(get_session),
) -> TableRead:
    catalog = SqlAlchemyTableCatalog(session)
    try:
        table = await table_usecase.get_table(catalog, table_id=table_id)
    except StorageFailureError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage unavailable") from exc
    if table is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return TableRead.from_db(table=table)
