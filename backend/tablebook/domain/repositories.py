from __future__ import annotations

from typing import Protocol

from ..models import DiningTable, Reservation, User


class TableCatalog(Protocol):
    async def find_by_number(self, number: int, *, for_update: bool = False) -> DiningTable | None: ...

    async def get_by_id(self, table_id: str) -> DiningTable | None: ...

    async def list_all(self) -> list[DiningTable]: ...

    async def create(
        self,
        *,
        table_id: str,
        number: int,
        places: int,
        is_vip: bool,
        min_order: float | None,
    ) -> DiningTable: ...


class ReservationStore(Protocol):
    async def find_by_table_and_date(self, table_number: int, date: str) -> list[Reservation]: ...

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
    ) -> Reservation: ...

    async def list_all(
        self,
        *,
        table_number: int | None = None,
        date: str | None = None,
    ) -> list[Reservation]: ...


class IdentityProvider(Protocol):
    async def create_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> User: ...

    async def authenticate(self, *, email: str, password: str) -> str: ...

    async def verify_token(self, token: str) -> int: ...
