"""Atlas Backend: Incident filtering (date range + news type)"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import Iterable, Optional, Union

from models import Incident

logger = logging.getLogger("atlas.filters")

# Tried after ISO-8601 for hand-entered Published_Date values
_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


@lru_cache(maxsize=65536)
def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a date or date-time string to an aware UTC-normalized datetime.

    Naive values are taken as UTC. Returns None when nothing matches.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    parsed = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


@dataclass(frozen=True)
class IncidentFilters:
    """Caller-supplied constraints. A None field means no constraint."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    crime_type: Optional[str] = None

    @property
    def has_date_range(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_empty(self) -> bool:
        return not self.has_date_range and not self.crime_type


def _coerce_bound(value: Union[str, date, datetime, None], label: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"Invalid {label}: {value!r}")
    return parsed


def parse_filters(
    start_date: Union[str, date, datetime, None] = None,
    end_date: Union[str, date, datetime, None] = None,
    crime_type: Optional[str] = None,
) -> IncidentFilters:
    """Build IncidentFilters from raw inputs.

    The date range only applies when both bounds are present; the end bound is
    extended to the last instant of its day. Raises ValueError on a bound that
    does not parse.
    """
    start = _coerce_bound(start_date, "startDate")
    end = _coerce_bound(end_date, "endDate")
    if start is None or end is None:
        start = end = None
    else:
        end = end_of_day(end)
    crime_type = crime_type.strip() if crime_type else None
    return IncidentFilters(start=start, end=end, crime_type=crime_type or None)


def _in_range(incident: Incident, start: datetime, end: datetime) -> bool:
    published = parse_timestamp(incident.publishedDate)
    if published is None:
        logger.debug(f"Invalid date format for incident {incident.id}: {incident.publishedDate}")
        return False
    return start <= published <= end


def filter_incidents(
    incidents: Iterable[Incident],
    filters: Optional[IncidentFilters] = None,
) -> list[Incident]:
    """Return the incidents matching every present constraint, in input order."""
    selected = list(incidents)
    if filters is None or filters.is_empty:
        return selected

    if filters.has_date_range:
        selected = [i for i in selected if _in_range(i, filters.start, filters.end)]

    if filters.crime_type:
        wanted = filters.crime_type.lower()
        selected = [i for i in selected if i.newsType.lower() == wanted]

    return selected
