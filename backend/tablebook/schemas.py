from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt
from pydantic.alias_generators import to_camel

from .domain.services import ReservationRequest
from .models import DiningTable, Reservation


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignUpRequest(CamelModel):
    first_name: str
    last_name: str
    email: str
    password: str


class SignInRequest(CamelModel):
    email: str
    password: str


class SignInResponse(CamelModel):
    id_token: str


class MessageResponse(CamelModel):
    message: str


class TableCreate(CamelModel):
    id: Optional[Union[StrictInt, Annotated[str, Field(max_length=64)]]] = None
    number: StrictInt = Field(ge=1)
    places: StrictInt = Field(ge=1)
    is_vip: StrictBool
    min_order: Optional[float] = Field(default=None, ge=0)


class TableCreated(CamelModel):
    id: str


class TableRead(CamelModel):
    id: str
    number: int
    places: int
    is_vip: bool
    min_order: float = 0

    @classmethod
    def from_db(cls, *, table: DiningTable) -> "TableRead":
        return cls(
            id=table.id,
            number=table.number,
            places=table.places,
            is_vip=table.is_vip,
            min_order=table.min_order or 0,
        )


class TableList(CamelModel):
    tables: list[TableRead]


class ReservationCreate(CamelModel):
    table_number: StrictInt
    client_name: str
    phone_number: str
    date: str
    slot_time_start: str
    slot_time_end: str

    def to_request(self) -> ReservationRequest:
        return ReservationRequest(
            table_number=self.table_number,
            client_name=self.client_name.strip(),
            phone_number=self.phone_number.strip(),
            date=self.date.strip(),
            slot_time_start=self.slot_time_start.strip(),
            slot_time_end=self.slot_time_end.strip(),
        )


class ReservationCreated(CamelModel):
    reservation_id: str


class ReservationRead(CamelModel):
    id: str
    table_number: int
    client_name: str
    phone_number: str
    date: str
    slot_time_start: str
    slot_time_end: str

    @classmethod
    def from_db(cls, *, reservation: Reservation) -> "ReservationRead":
        return cls(
            id=reservation.id,
            table_number=reservation.table_number,
            client_name=reservation.client_name,
            phone_number=reservation.phone_number,
            date=reservation.date,
            slot_time_start=reservation.slot_time_start,
            slot_time_end=reservation.slot_time_end,
        )


class ReservationList(CamelModel):
    reservations: list[ReservationRead]
