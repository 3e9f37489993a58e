import uuid

from ..domain.errors import InvalidRequestError
from ..domain.repositories import TableCatalog
from ..models import DiningTable


async def list_tables(catalog: TableCatalog) -> list[DiningTable]:
    return await catalog.list_all()


async def get_table(catalog: TableCatalog, *, table_id: str) -> DiningTable | None:
    return await catalog.get_by_id(table_id)


async def create_table(
    catalog: TableCatalog,
    *,
    table_id: int | str | None,
    number: int,
    places: int,
    is_vip: bool,
    min_order: float | None,
) -> DiningTable:
    if number < 1:
        raise InvalidRequestError("number must be >= 1")
    if places < 1:
        raise InvalidRequestError("places must be >= 1")
    if min_order is not None and min_order < 0:
        raise InvalidRequestError("minOrder must not be negative")

    storage_id = str(table_id) if table_id is not None and str(table_id).strip() else str(uuid.uuid4())
    return await catalog.create(
        table_id=storage_id,
        number=number,
        places=places,
        is_vip=is_vip,
        min_order=min_order if min_order is not None else 0,
    )
