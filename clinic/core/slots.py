"""
Slot label helpers.

A slot label is a canonical 24h ``HH:MM`` string naming one bookable
time of day on a doctor's recurring daily schedule.
"""
import re
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Tuple

SLOT_FORMAT = "%H:%M"
SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
NOON = time(12, 0)


def is_slot_label(label: str) -> bool:
    return bool(label) and SLOT_PATTERN.match(label) is not None


def parse_slot(label: str) -> time:
    return datetime.strptime(label, SLOT_FORMAT).time()


def slot_label(moment: datetime) -> str:
    """Time-of-day label of a timestamp, e.g. ``09:30``."""
    return moment.strftime(SLOT_FORMAT)


def sort_slots(labels: Iterable[str]) -> List[str]:
    return sorted(labels, key=parse_slot)


def validate_slot_labels(labels: Iterable[str]) -> List[str]:
    """Return the labels unchanged, or raise ValueError on a bad or repeated label."""
    seen = set()
    result = []
    for label in labels:
        if not is_slot_label(label):
            raise ValueError(f"Invalid slot label '{label}', expected HH:MM")
        if label in seen:
            raise ValueError(f"Duplicate slot label '{label}'")
        seen.add(label)
        result.append(label)
    return result


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Half-open interval [day 00:00, day+1 00:00)."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)
