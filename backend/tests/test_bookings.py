"""Tests for booking listing, ownership checks, cancellation and analytics."""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.errors import AuthorizationError, InvalidTransition, NotFound
from app.schemas.booking import Booking, BookingStatus, FareBreakdown
from app.schemas.passenger import Passenger
from app.services.analytics import TravelAnalytics, summarize
from app.services.booking import FareCalculator

from conftest import TODAY


def _booking(
    travel_date: date,
    user_id: str = "user-1",
    destination: str = "Mumbai Central (MMCT)",
    status: BookingStatus = BookingStatus.UPCOMING,
    passengers: int = 1,
) -> Booking:
    fare = FareCalculator().calculate(1000, passengers).rounded()
    return Booking(
        user_id=user_id,
        train_id="T001",
        train_name="Rajdhani Express",
        train_number="12301",
        origin="New Delhi (NDLS)",
        destination=destination,
        travel_date=travel_date,
        departure_time="17:00",
        arrival_time="09:00",
        selected_class="3A",
        seats=list(range(1, passengers + 1)),
        num_passengers=passengers,
        passengers=[
            Passenger(name=f"Passenger {i}", age=30, gender="other", seat_number=i)
            for i in range(1, passengers + 1)
        ],
        fare=fare,
        status=status,
        pnr="4821937465",
        transaction_id="731902846153024",
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


async def _store(booking_store, booking: Booking) -> Booking:
    booking.id = await booking_store.create(booking)
    return booking


def test_booking_rejects_passenger_seat_mismatch() -> None:
    booking = _booking(TODAY)

    with pytest.raises(ValueError):
        Booking(**{**booking.model_dump(), "seats": [1, 2]})


def test_booking_rejects_inconsistent_total() -> None:
    booking = _booking(TODAY)
    wrong = FareBreakdown(ticket_fare=1000, convenience_fee=31.8, total_price=1000)

    with pytest.raises(ValueError):
        Booking(**{**booking.model_dump(exclude={"fare"}), "fare": wrong})


async def test_list_splits_upcoming_and_past(booking_store, manager, user) -> None:
    await _store(booking_store, _booking(TODAY + timedelta(days=20)))
    await _store(booking_store, _booking(TODAY + timedelta(days=2)))
    await _store(booking_store, _booking(TODAY - timedelta(days=30)))
    await _store(booking_store, _booking(TODAY - timedelta(days=3)))
    await _store(booking_store, _booking(TODAY + timedelta(days=5), status=BookingStatus.CANCELLED))
    await _store(booking_store, _booking(TODAY, user_id="someone-else"))

    result = await manager.list_for_user(user)

    assert [b.travel_date for b in result.upcoming] == [TODAY + timedelta(days=2), TODAY + timedelta(days=20)]
    assert [b.travel_date for b in result.past] == [
        TODAY + timedelta(days=5),
        TODAY - timedelta(days=3),
        TODAY - timedelta(days=30),
    ]
    assert result.past[1].display_status == BookingStatus.COMPLETED
    assert result.past[0].display_status == BookingStatus.CANCELLED


async def test_today_counts_as_upcoming(booking_store, manager, user) -> None:
    await _store(booking_store, _booking(TODAY))

    result = await manager.list_for_user(user)

    assert len(result.upcoming) == 1


async def test_get_checks_owner(booking_store, manager) -> None:
    booking = await _store(booking_store, _booking(TODAY, user_id="user-1"))

    with pytest.raises(AuthorizationError):
        await manager.get(booking.id, {"uid": "user-2"})


async def test_get_missing_booking(manager, user) -> None:
    with pytest.raises(NotFound):
        await manager.get("missing", user)


async def test_cancel_is_idempotent_and_keeps_fare(booking_store, manager, user) -> None:
    booking = await _store(booking_store, _booking(TODAY + timedelta(days=4), passengers=2))

    first = await manager.cancel(booking.id, user)
    second = await manager.cancel(booking.id, user)

    stored = await booking_store.get(booking.id)
    assert first.status == BookingStatus.CANCELLED
    assert second.status == BookingStatus.CANCELLED
    assert stored.status == BookingStatus.CANCELLED
    assert stored.cancelled_at is not None
    assert stored.fare == booking.fare


async def test_cannot_cancel_completed_journey(booking_store, manager, user) -> None:
    booking = await _store(booking_store, _booking(TODAY - timedelta(days=1)))

    with pytest.raises(InvalidTransition):
        await manager.cancel(booking.id, user)


async def test_cannot_cancel_someone_elses_booking(booking_store, manager) -> None:
    booking = await _store(booking_store, _booking(TODAY + timedelta(days=1), user_id="user-1"))

    with pytest.raises(AuthorizationError):
        await manager.cancel(booking.id, {"uid": "user-2"})

    assert (await booking_store.get(booking.id)).status == BookingStatus.UPCOMING


def test_summarize_current_year_without_cancellations() -> None:
    bookings = [
        _booking(date(2026, 1, 15), destination="Jaipur Jn (JP)"),
        _booking(date(2026, 1, 20), destination="Jaipur Jn (JP)"),
        _booking(date(2026, 3, 2), destination="Pune Jn (PUNE)", passengers=2),
        _booking(date(2026, 4, 9), destination="Kalka (KLK)"),
        _booking(date(2026, 5, 9), destination="Pune Jn (PUNE)", status=BookingStatus.CANCELLED),
        _booking(date(2025, 12, 30), destination="Guwahati (GHY)"),
    ]

    report = summarize(bookings, 2026)

    single = 1000 + 20 + 11.80
    double = 2000 + 20 + 23.60
    assert report.year == 2026
    assert report.total_bookings == 4
    assert report.total_spent == pytest.approx(3 * single + double)
    assert report.top_destinations[0].station == "Jaipur Jn (JP)"
    assert report.top_destinations[0].count == 2
    assert len(report.top_destinations) == 3
    assert [m.month for m in report.monthly_bookings][:3] == ["Jan", "Feb", "Mar"]
    assert report.monthly_bookings[0].bookings == 2
    assert report.monthly_bookings[4].bookings == 0
    assert report.monthly_spending[2].amount == pytest.approx(double)


def test_summarize_with_no_bookings() -> None:
    report = summarize([], 2026)

    assert report.total_bookings == 0
    assert report.total_spent == 0
    assert report.top_destinations == []
    assert len(report.monthly_spending) == 12


async def test_analytics_reads_only_own_bookings(booking_store) -> None:
    await _store(booking_store, _booking(date(2026, 2, 1)))
    await _store(booking_store, _booking(date(2026, 2, 1), user_id="user-2"))

    report = await TravelAnalytics(booking_store, today=lambda: TODAY).for_user("user-1")

    assert report.total_bookings == 1
    assert report.monthly_bookings[1].bookings == 1
