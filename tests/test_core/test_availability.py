"""Tests for reservation overlap and item availability."""

from datetime import date, datetime, timezone

import pytest

from rentdesk.core.availability import available_items, is_reserved
from rentdesk.models.dates import DateWindow
from rentdesk.models.reservation import ReservationStatus


def test_single_day_inside_and_outside_window(make_reservation) -> None:
    """Test that both ends of a reservation are inclusive."""
    reservations = [make_reservation(date_from="2025-06-01", date_to="2025-06-03")]

    assert is_reserved("chairs", "2025-06-01", reservations)
    assert is_reserved("chairs", "2025-06-03", reservations)
    assert is_reserved("chairs", date(2025, 6, 2), reservations)
    assert not is_reserved("chairs", "2025-05-31", reservations)
    assert not is_reserved("chairs", "2025-06-04", reservations)


def test_other_items_are_not_reserved(make_reservation) -> None:
    reservations = [make_reservation(items={"tables": 1})]

    assert not is_reserved("chairs", "2025-06-01", reservations)
    assert is_reserved("tables", "2025-06-01", reservations)


@pytest.mark.parametrize(
    ("first", "second", "expected"),
    [
        (("2025-06-01", "2025-06-03"), ("2025-06-04", "2025-06-05"), False),
        (("2025-06-01", "2025-06-03"), ("2025-06-03", "2025-06-05"), True),
        (("2025-06-01", "2025-06-10"), ("2025-06-04", "2025-06-05"), True),
        (("2025-06-02", "2025-06-02"), ("2025-06-01", "2025-06-03"), True),
        (("2025-05-01", "2025-05-31"), ("2025-06-01", "2025-06-30"), False),
    ],
)
def test_overlap_is_symmetric(make_reservation, first, second, expected) -> None:
    """Test that swapping candidate and existing windows gives the same answer."""
    existing_first = [make_reservation(date_from=first[0], date_to=first[1])]
    existing_second = [make_reservation(date_from=second[0], date_to=second[1])]

    assert is_reserved("chairs", second, existing_first) is expected
    assert is_reserved("chairs", first, existing_second) is expected


def test_finished_reservations_never_block(make_reservation) -> None:
    reservations = [make_reservation(status=ReservationStatus.FINISHED)]

    assert not is_reserved("chairs", "2025-06-01", reservations)


def test_datetimes_are_compared_by_day(make_reservation) -> None:
    """Test that a late-evening timestamp still counts as its calendar day."""
    reservations = [make_reservation(date_from="2025-06-01", date_to="2025-06-03")]
    late = datetime(2025, 6, 3, 23, 30, tzinfo=timezone.utc)
    next_morning = datetime(2025, 6, 4, 0, 15, tzinfo=timezone.utc)

    assert is_reserved("chairs", late, reservations)
    assert not is_reserved("chairs", next_morning, reservations)


def test_ignore_reservation_being_edited(make_reservation) -> None:
    reservations = [make_reservation(reservation_id="editing")]

    assert not is_reserved(
        "chairs", "2025-06-01", reservations, ignore_reservation_id="editing"
    )


def test_available_items_filters_stock_and_bookings(make_item, make_reservation) -> None:
    inventory = [
        make_item("chairs", quantity=10),
        make_item("tables", quantity=0),
        make_item("tents", quantity=3),
    ]
    reservations = [
        make_reservation(
            items={"tents": 1}, date_from="2025-06-01", date_to="2025-06-03"
        )
    ]

    result = available_items(
        DateWindow.of("2025-06-02", "2025-06-04"), reservations, inventory
    )

    assert [item.id for item in result] == ["chairs"]


def test_available_items_ignore_finished_reservations(make_item, make_reservation) -> None:
    inventory = [make_item("tents", quantity=3)]
    reservations = [
        make_reservation(
            items={"tents": 1},
            date_from="2025-06-01",
            date_to="2025-06-05",
            status=ReservationStatus.FINISHED,
        )
    ]

    result = available_items(("2025-06-02", "2025-06-03"), reservations, inventory)

    assert [item.id for item in result] == ["tents"]


def test_available_items_outside_booking_window(make_item, make_reservation) -> None:
    inventory = [make_item("tents", quantity=3)]
    reservations = [make_reservation(items={"tents": 1})]

    result = available_items(("2025-06-04", "2025-06-06"), reservations, inventory)

    assert [item.id for item in result] == ["tents"]


def test_available_items_excludes_lines_already_chosen(make_item) -> None:
    """Test that an item picked on another line is hidden, except on its own line."""
    inventory = [make_item("chairs"), make_item("tables")]

    other_line = available_items(
        "2025-06-01", [], inventory, exclude_item_ids=["chairs"]
    )
    own_line = available_items(
        "2025-06-01",
        [],
        inventory,
        exclude_item_ids=["chairs"],
        current_item_id="chairs",
    )

    assert [item.id for item in other_line] == ["tables"]
    assert [item.id for item in own_line] == ["chairs", "tables"]


def test_window_rejects_reversed_bounds() -> None:
    with pytest.raises(ValueError):
        DateWindow.of("2025-06-03", "2025-06-01")
