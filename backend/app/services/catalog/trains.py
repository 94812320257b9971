"""
Static train catalog
Mock timetable data for Indian Railways routes
"""
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from app.core.errors import NotFound
from app.schemas.train import AvailabilityDay, Train

logger = logging.getLogger(__name__)

AVAILABILITY_WINDOW_DAYS = 10


def _train(id, name, number, origin, destination, dep, arr, duration, price, classes) -> Train:
    return Train(
        id=id,
        train_name=name,
        train_number=number,
        origin=origin,
        destination=destination,
        departure_time=dep,
        arrival_time=arr,
        duration=duration,
        price=price,
        available_classes=classes,
    )


TRAINS: List[Train] = [
    _train('T001', 'Rajdhani Express', '12301', 'New Delhi (NDLS)', 'Mumbai Central (MMCT)', '17:00', '09:00', '16h 00m', 2500, ['1A', '2A', '3A']),
    _train('T002', 'Shatabdi Express', '12002', 'Chennai Egmore (MS)', 'Bengaluru Cantt (BNC)', '06:00', '11:00', '5h 00m', 1200, ['SL', '2S', 'economy']),
    _train('T003', 'Deccan Queen', '12124', 'Pune Jn (PUNE)', 'Chhatrapati Shivaji Maharaj Terminus (CSMT)', '07:15', '10:25', '3h 10m', 450, ['economy', '2S']),
    _train('T004', 'Coromandel Express', '12841', 'Kolkata Shalimar (SHM)', 'Chennai Central (MAS)', '14:50', '17:00', '26h 10m', 1800, ['SL', '3A', '2A']),
    _train('T005', 'Kacheguda Express', '12786', 'KSR Bengaluru City Junction (SBC)', 'Hyderabad Deccan Nampally (HYB)', '18:20', '05:40', '11h 20m', 950, ['SL', '3A']),
    _train('T006', 'Ashram Express', '12915', 'Ahmedabad Jn (ADI)', 'Jaipur Jn (JP)', '19:30', '05:45', '10h 15m', 800, ['SL', '3A', '2A']),
    _train('T007', 'Tejas Express', '82501', 'Lucknow Charbagh NR (LKO)', 'New Delhi (NDLS)', '06:10', '12:25', '6h 15m', 1500, ['business', 'first', 'economy']),
    _train('T008', 'North East Express', '12506', 'Anand Vihar Terminal (ANVT)', 'Kamakhya Jn (KYQ)', '07:40', '16:25', '32h 45m', 1100, ['SL', '3A']),
    _train('T009', 'Nagpur Pune Superfast', '12136', 'Nagpur Jn (NGP)', 'Pune Jn (PUNE)', '18:00', '09:45', '15h 45m', 1050, ['SL', '3A', '2A']),
    _train('T010', 'Marudhar Express', '14854', 'Jaipur Jn (JP)', 'Varanasi Jn (BSB)', '13:45', '06:15', '16h 30m', 700, ['SL', '3A']),
    _train('T011', 'Kalka Mail', '12311', 'Kolkata Howrah Jn (HWH)', 'Kalka (KLK)', '19:40', '04:30', '32h 50m', 1750, ['SL', '3A', '2A', '1A']),
    _train('T012', 'Jammu Rajdhani', '12425', 'New Delhi (NDLS)', 'Jammu Tawi (JAT)', '20:40', '05:00', '8h 20m', 2200, ['1A', '2A', '3A']),
    _train('T013', 'Saraighat Express', '12345', 'Kolkata Howrah Jn (HWH)', 'Guwahati (GHY)', '15:50', '09:50', '18h 00m', 1300, ['SL', '3A', '2A']),
    _train('T014', 'Duronto Express', '12273', 'Kolkata Howrah Jn (HWH)', 'New Delhi (NDLS)', '08:35', '06:00', '21h 25m', 2800, ['1A', '2A', '3A', 'first']),
    _train('T015', 'Gitanjali Express', '12860', 'Kolkata Howrah Jn (HWH)', 'Chhatrapati Shivaji Maharaj Terminus (CSMT)', '13:50', '21:20', '31h 30m', 1900, ['SL', '3A', '2A']),
]


class TrainCatalog:
    """Read-only lookup over a list of trains"""

    def __init__(self, trains: Optional[List[Train]] = None):
        self._trains: Dict[str, Train] = {t.id: t for t in (trains if trains is not None else TRAINS)}

    def all(self) -> List[Train]:
        return list(self._trains.values())

    def get(self, train_id: str) -> Train:
        train = self._trains.get(train_id)
        if train is None:
            raise NotFound(f"Train {train_id} not found")
        return train

    def search(self, origin: Optional[str] = None, destination: Optional[str] = None) -> List[Train]:
        """Case-insensitive exact match on station names; a missing side matches all"""
        results = []
        for train in self._trains.values():
            if origin and train.origin.lower() != origin.strip().lower():
                continue
            if destination and train.destination.lower() != destination.strip().lower():
                continue
            results.append(train)
        logger.info(f"Train search {origin!r} -> {destination!r}: {len(results)} result(s)")
        return results

    def availability(self, train_id: str, start: date, today: Optional[date] = None) -> List[AvailabilityDay]:
        """
        Availability calendar for the next few days.

        Every listed day reads "Available": there is no live inventory
        behind it. Dates in the past are moved forward to today.
        """
        self.get(train_id)
        today = today or date.today()
        first = max(start, today)
        return [
            AvailabilityDay(date=first + timedelta(days=i), status="Available")
            for i in range(AVAILABILITY_WINDOW_DAYS)
        ]
