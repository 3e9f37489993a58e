from datetime import datetime, timezone
from typing import List, Optional

import pytest
from tablebook.domain.errors import (
    InvalidRequestError,
    MissingFieldsError,
    OverlapConflictError,
    StorageFailureError,
    TableNotFoundError,
)
from tablebook.domain.services import ReservationRequest
from tablebook.models import DiningTable, Reservation
from tablebook.usecases import reservations as uc


def _utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class FakeTableCatalog:
    def __init__(self, numbers: List[int]) -> None:
        self.tables = [
            DiningTable(id=str(100 + n), number=n, places=4, is_vip=False, min_order=0, created_at=_utc_now_naive())
            for n in numbers
        ]
        self.locked: List[int] = []

    async def find_by_number(self, number: int, *, for_update: bool = False) -> Optional[DiningTable]:
        if for_update:
            self.locked.append(number)
        return next((t for t in self.tables if t.number == number), None)


class FakeReservationStore:
    def __init__(self, existing: Optional[List[Reservation]] = None, fail_on: Optional[str] = None) -> None:
        self.rows: List[Reservation] = list(existing or [])
        self.inserted: List[Reservation] = []
        self.fail_on = fail_on

    async def find_by_table_and_date(self, table_number: int, date: str) -> List[Reservation]:
        if self.fail_on == "scan":
            raise StorageFailureError("storage unavailable")
        return [r for r in self.rows if r.table_number == table_number and r.date == date]

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
        if self.fail_on == "insert":
            raise StorageFailureError("storage unavailable")
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
        self.rows.append(reservation)
        self.inserted.append(reservation)
        return reservation

    async def list_all(self, *, table_number: Optional[int] = None, date: Optional[str] = None) -> List[Reservation]:
        return [
            r
            for r in self.rows
            if (table_number is None or r.table_number == table_number) and (date is None or r.date == date)
        ]


def _booked(res_id: str, start: str, end: str, *, table_number: int = 5, date: str = "2024-06-01") -> Reservation:
    return Reservation(
        id=res_id,
        table_number=table_number,
        client_name="Existing Guest",
        phone_number="555-0100",
        date=date,
        slot_time_start=start,
        slot_time_end=end,
        created_at=_utc_now_naive(),
    )


def _request(start: str = "18:00", end: str = "19:00", *, table_number: int = 5) -> ReservationRequest:
    return ReservationRequest(
        table_number=table_number,
        client_name="Jane Doe",
        phone_number="555-0199",
        date="2024-06-01",
        slot_time_start=start,
        slot_time_end=end,
    )


def _admission(catalog: FakeTableCatalog, store: FakeReservationStore) -> uc.ReservationAdmission:
    return uc.ReservationAdmission(catalog, store, id_factory=lambda: "res-new")


@pytest.mark.asyncio
async def test_books_first_reservation_of_the_day() -> None:
    catalog = FakeTableCatalog([5])
    store = FakeReservationStore()

    reservation = await _admission(catalog, store).create_reservation(_request())

    assert reservation.id == "res-new"
    stored = await store.find_by_table_and_date(5, "2024-06-01")
    assert len(stored) == 1
    assert stored[0].client_name == "Jane Doe"
    assert stored[0].slot_time_start == "18:00"
    assert stored[0].slot_time_end == "19:00"


@pytest.mark.asyncio
async def test_locks_table_row_before_scanning() -> None:
    catalog = FakeTableCatalog([5])
    store = FakeReservationStore()
    await _admission(catalog, store).create_reservation(_request())
    assert catalog.locked == [5]


@pytest.mark.asyncio
async def test_rejects_unknown_table_without_writing() -> None:
    catalog = FakeTableCatalog([1, 2])
    store = FakeReservationStore()

    with pytest.raises(TableNotFoundError):
        await _admission(catalog, store).create_reservation(_request())
    assert store.inserted == []


@pytest.mark.asyncio
async def test_rejects_overlapping_slot() -> None:
    store = FakeReservationStore([_booked("res-1", "18:00", "19:00")])

    with pytest.raises(OverlapConflictError) as excinfo:
        await _admission(FakeTableCatalog([5]), store).create_reservation(_request("18:30", "19:30"))

    assert excinfo.value.conflicting_id == "res-1"
    assert store.inserted == []
    assert len(await store.find_by_table_and_date(5, "2024-06-01")) == 1


@pytest.mark.asyncio
async def test_rejects_window_that_wraps_existing_booking() -> None:
    store = FakeReservationStore([_booked("res-1", "18:15", "18:45")])
    with pytest.raises(OverlapConflictError):
        await _admission(FakeTableCatalog([5]), store).create_reservation(_request("18:00", "19:00"))


@pytest.mark.asyncio
async def test_accepts_back_to_back_slot() -> None:
    store = FakeReservationStore([_booked("res-1", "18:00", "19:00")])

    reservation = await _admission(FakeTableCatalog([5]), store).create_reservation(_request("19:00", "20:00"))

    assert reservation.id == "res-new"
    assert len(await store.find_by_table_and_date(5, "2024-06-01")) == 2


@pytest.mark.asyncio
async def test_other_tables_and_dates_do_not_conflict() -> None:
    store = FakeReservationStore(
        [
            _booked("res-1", "18:00", "19:00", table_number=6),
            _booked("res-2", "18:00", "19:00", date="2024-06-02"),
        ]
    )
    reservation = await _admission(FakeTableCatalog([5, 6]), store).create_reservation(_request())
    assert reservation.table_number == 5


@pytest.mark.asyncio
async def test_missing_fields_rejected_before_storage() -> None:
    catalog = FakeTableCatalog([5])
    store = FakeReservationStore()
    request = ReservationRequest(
        table_number=5,
        client_name="",
        phone_number="555",
        date="2024-06-01",
        slot_time_start="18:00",
        slot_time_end="19:00",
    )
    with pytest.raises(MissingFieldsError):
        await _admission(catalog, store).create_reservation(request)
    assert catalog.locked == []
    assert store.inserted == []


@pytest.mark.asyncio
async def test_inverted_window_rejected_before_storage() -> None:
    catalog = FakeTableCatalog([5])
    with pytest.raises(InvalidRequestError):
        await _admission(catalog, FakeReservationStore()).create_reservation(_request("20:00", "19:00"))
    assert catalog.locked == []


@pytest.mark.asyncio
async def test_storage_failure_during_scan_propagates_without_write() -> None:
    store = FakeReservationStore(fail_on="scan")
    with pytest.raises(StorageFailureError):
        await _admission(FakeTableCatalog([5]), store).create_reservation(_request())
    assert store.inserted == []


@pytest.mark.asyncio
async def test_storage_failure_during_insert_propagates() -> None:
    store = FakeReservationStore(fail_on="insert")
    with pytest.raises(StorageFailureError):
        await _admission(FakeTableCatalog([5]), store).create_reservation(_request())


@pytest.mark.asyncio
async def test_default_ids_are_unique_uuids() -> None:
    store = FakeReservationStore()
    admission = uc.ReservationAdmission(FakeTableCatalog([5]), store)
    first = await admission.create_reservation(_request("10:00", "11:00"))
    second = await admission.create_reservation(_request("11:00", "12:00"))
    assert first.id != second.id
    assert len(first.id) == 36


@pytest.mark.asyncio
async def test_list_reservations_passes_filters() -> None:
    store = FakeReservationStore([_booked("res-1", "18:00", "19:00"), _booked("res-2", "18:00", "19:00", table_number=7)])
    rows = await uc.list_reservations(store, table_number=7)
    assert [r.id for r in rows] == ["res-2"]
