"""Atlas Backend: Dashboard aggregates over a set of incidents"""

from collections import Counter
from typing import Optional, Sequence

from categories import CATEGORIES, categorize
from filters import parse_timestamp
from models import CountEntry, Incident, IncidentSummary

TOP_N = 5

_TIME_OF_DAY = [
    "Morning (5AM-12PM)",
    "Afternoon (12PM-5PM)",
    "Evening (5PM-9PM)",
    "Night (9PM-5AM)",
    "Unknown",
]


def time_of_day(published: str) -> str:
    moment = parse_timestamp(published)
    if moment is None:
        return "Unknown"
    hour = moment.hour
    if 5 <= hour < 12:
        return "Morning (5AM-12PM)"
    if 12 <= hour < 17:
        return "Afternoon (12PM-5PM)"
    if 17 <= hour < 21:
        return "Evening (5PM-9PM)"
    return "Night (9PM-5AM)"


def _location_key(incident: Incident) -> str:
    if incident.location and incident.location != "Unknown Location":
        return incident.location
    return f"{incident.latitude:.4f},{incident.longitude:.4f}"


def _entries(counts: Counter, limit: Optional[int] = None) -> list[CountEntry]:
    return [CountEntry(label=k, count=v) for k, v in counts.most_common(limit)]


def summarize(incidents: Sequence[Incident], stale: bool = False) -> IncidentSummary:
    news_types = Counter(i.newsType for i in incidents)
    locations = Counter(_location_key(i) for i in incidents)
    categories = Counter(categorize(i.newsType) for i in incidents)
    periods = Counter(time_of_day(i.publishedDate) for i in incidents)

    months: Counter = Counter()
    for incident in incidents:
        moment = parse_timestamp(incident.publishedDate)
        if moment is not None:
            months[moment.strftime("%Y-%m")] += 1

    return IncidentSummary(
        totalIncidents=len(incidents),
        topNewsTypes=_entries(news_types, TOP_N),
        categories=[CountEntry(label=c, count=categories.get(c, 0)) for c in CATEGORIES],
        topLocations=_entries(locations, TOP_N),
        timeOfDay=[CountEntry(label=p, count=periods.get(p, 0)) for p in _TIME_OF_DAY],
        byMonth=[CountEntry(label=m, count=months[m]) for m in sorted(months)],
        stale=stale,
    )
