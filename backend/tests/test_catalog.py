"""Tests for the train catalog."""

from datetime import date, timedelta

import pytest

from app.core.errors import NotFound
from app.services.catalog import TRAINS, TrainCatalog


def test_catalog_lists_all_trains() -> None:
    assert len(TrainCatalog().all()) == len(TRAINS) == 15


def test_search_is_case_insensitive_exact_match() -> None:
    results = TrainCatalog().search("new delhi (ndls)", "MUMBAI CENTRAL (MMCT)")

    assert [t.id for t in results] == ["T001"]


def test_search_by_origin_only() -> None:
    results = TrainCatalog().search(origin="Kolkata Howrah Jn (HWH)")

    assert {t.id for t in results} == {"T011", "T013", "T014", "T015"}


def test_search_without_match() -> None:
    assert TrainCatalog().search("Nowhere", "Elsewhere") == []


def test_unknown_train() -> None:
    with pytest.raises(NotFound):
        TrainCatalog().get("T404")


def test_availability_covers_ten_days_from_start() -> None:
    today = date(2026, 3, 10)

    days = TrainCatalog().availability("T001", today + timedelta(days=3), today=today)

    assert len(days) == 10
    assert days[0].date == today + timedelta(days=3)
    assert all(day.status == "Available" for day in days)


def test_availability_never_starts_in_the_past() -> None:
    today = date(2026, 3, 10)

    days = TrainCatalog().availability("T001", today - timedelta(days=5), today=today)

    assert days[0].date == today
