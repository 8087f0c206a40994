"""Reservation models."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from rentdesk.models.dates import DateWindow

# Stored and returned as a JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ReservationStatus(str, Enum):
    """Reservation lifecycle. The only transition is active -> finished."""

    ACTIVE = "active"
    FINISHED = "finished"


class ReservationLine(BaseModel):
    """Equipment claimed by a reservation.

    ``item_name`` is the inventory name as it was when the line was booked.
    Renaming the inventory item later does not change it.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    item_id: str
    item_name: str = ""
    quantity: int = Field(ge=1)


class Reservation(BaseModel):
    """A booking of equipment over an inclusive date range."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    client_name: str
    location: str
    date_from: date
    date_to: date
    time: str
    items: list[ReservationLine] = Field(default_factory=list)
    total_price: Money = Field(gt=0)
    notes: str | None = None
    status: ReservationStatus = ReservationStatus.ACTIVE

    @model_validator(mode="after")
    def check_range(self) -> "Reservation":
        if self.date_from > self.date_to:
            raise ValueError("dateFrom must not be after dateTo")
        return self

    @property
    def window(self) -> DateWindow:
        return DateWindow(start=self.date_from, end=self.date_to)

    @property
    def is_finished(self) -> bool:
        return self.status == ReservationStatus.FINISHED

    def claims(self, item_id: str) -> bool:
        """Check if any line references the item."""
        return any(line.item_id == item_id for line in self.items)


class ReservationLineInput(BaseModel):
    """A submitted line; validated by ``validate_reservation``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    item_id: str = ""
    item_name: str = ""
    quantity: int = 0

    @field_validator("item_id", "item_name", mode="before")
    @classmethod
    def blank_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("quantity", mode="before")
    @classmethod
    def blank_quantity(cls, value: Any) -> Any:
        return 0 if value in (None, "") else value


class ReservationInput(BaseModel):
    """Submitted reservation fields, before validation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    client_name: str = ""
    location: str = ""
    date_from: date | None = None
    date_to: date | None = None
    time: str = ""
    items: list[ReservationLineInput] = Field(default_factory=list)
    total_price: Money = Decimal("0")
    notes: str | None = None

    @field_validator("client_name", "location", "time", mode="before")
    @classmethod
    def blank_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def blank_date(cls, value: Any) -> Any:
        """Unset date inputs arrive as empty strings."""
        return None if value == "" else value

    @field_validator("total_price", mode="before")
    @classmethod
    def blank_price(cls, value: Any) -> Any:
        return Decimal("0") if value in (None, "") else value

    def claimed_quantities(self) -> dict[str, int]:
        """Total quantity per item id across all lines."""
        totals: dict[str, int] = {}
        for line in self.items:
            if line.item_id:
                totals[line.item_id] = totals.get(line.item_id, 0) + line.quantity
        return totals

    def to_document(self) -> dict[str, Any]:
        """Document fields as stored, with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


def claimed_quantities(reservation: Reservation) -> dict[str, int]:
    """Total quantity per item id claimed by a stored reservation."""
    totals: dict[str, int] = {}
    for line in reservation.items:
        totals[line.item_id] = totals.get(line.item_id, 0) + line.quantity
    return totals
