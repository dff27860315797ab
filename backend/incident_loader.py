"""Incident loader for the merged news CSV.

Reads the source file row by row and turns every row into exactly one
``Incident``. Rows are never rejected: each missing or blank field falls back
to the entry in ``FIELD_DEFAULTS``, and unusable coordinates are synthesized
by the ``CoordinateResolver``.

Parsing contract:
  - header row defines the columns
  - comma delimited, double-quote quoting (``""`` escapes a quote)
  - blank lines skipped, ragged rows tolerated
  - every cell trimmed
"""

import csv
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, Mapping, Optional, Union

from config import COLUMN_MAP, COORDINATE_COLUMN
from coordinates import CoordinateResolver
from models import Incident

logger = logging.getLogger("atlas.loader")

# Summaries and quotes in the merged file can exceed csv's 128 KiB default
_MAX_FIELD_SIZE = 16 * 1024 * 1024
csv.field_size_limit(_MAX_FIELD_SIZE)


class IncidentLoadError(Exception):
    """The source file could not be read or parsed as a whole."""


Derivation = Callable[[int, str], str]

# Incident field → literal default, or rule(row_index, load_time_iso) → value
FIELD_DEFAULTS: dict[str, Union[str, Derivation]] = {
    "id": lambda index, _: f"incident-{index}",
    "title": "No Title",
    "description": "No Description",
    "publishedDate": lambda _, load_time: load_time,
    "newsType": "Unknown",
    "involvedPersonsRole": "Unknown",
    "location": "Unknown Location",
    "impact": "",
    "source": "",
    "date_time": "",
    "tone": "",
    "quotes": "",
    "publicReaction": "",
    "pastEvents": "",
    "futureImplications": "",
    "mainSubject": "",
    "dayOfWeek": "",
    "imagesAndMedia": "",
}

# Applied to the raw value before the blank check
FIELD_CLEANERS: dict[str, Callable[[str], str]] = {
    "location": lambda v: v.replace('"', "").strip(),
}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_keywords(raw: Optional[str]) -> tuple[str, ...]:
    """Split a semicolon-delimited keyword cell, dropping blank tokens."""
    if not raw:
        return ()
    return tuple(k.strip() for k in raw.split(";") if k.strip())


def _field_value(field: str, row: Mapping[str, Optional[str]], index: int, load_time: str) -> str:
    raw = row.get(COLUMN_MAP[field]) or ""
    cleaner = FIELD_CLEANERS.get(field)
    if cleaner:
        raw = cleaner(raw)
    if raw:
        return raw
    default = FIELD_DEFAULTS[field]
    return default(index, load_time) if callable(default) else default


def normalize_row(
    row: Mapping[str, Optional[str]],
    index: int,
    resolver: CoordinateResolver,
    load_time: Optional[str] = None,
) -> tuple[Incident, bool]:
    """Build one Incident from a raw row.

    Returns ``(incident, coordinates_resolved)``; the flag is False when the
    position was synthesized.
    """
    load_time = load_time or utc_now_iso()
    values = {field: _field_value(field, row, index, load_time) for field in FIELD_DEFAULTS}
    (lat, lng), resolved = resolver.resolve(row.get(COORDINATE_COLUMN))
    if not resolved:
        logger.debug(f"Row {index}: synthesized coordinates ({lat:.4f}, {lng:.4f})")
    incident = Incident(
        **values,
        latitude=lat,
        longitude=lng,
        keywords=parse_keywords(row.get(COLUMN_MAP["keywords"])),
    )
    return incident, resolved


def read_rows(path: Union[str, Path]) -> Iterator[dict[str, Optional[str]]]:
    """Yield trimmed rows keyed by header name.

    Cells beyond the header width are dropped; missing trailing cells are None.
    Undecodable bytes become U+FFFD instead of failing the read.
    """
    with open(path, "r", encoding="utf-8-sig", errors="replace", newline="") as f:
        reader = csv.DictReader(f, quotechar='"', doublequote=True)
        if reader.fieldnames:
            reader.fieldnames = [name.strip() for name in reader.fieldnames]
        for record in reader:
            yield {
                key: value.strip() if isinstance(value, str) else value
                for key, value in record.items()
                if key is not None
            }


def load_incidents(
    path: Union[str, Path],
    resolver: Optional[CoordinateResolver] = None,
) -> tuple[Incident, ...]:
    """Parse the whole CSV into an immutable collection of incidents.

    Raises IncidentLoadError when the file cannot be read or parsed.
    """
    resolver = resolver or CoordinateResolver()
    load_time = utc_now_iso()
    t0 = time.perf_counter()
    incidents: list[Incident] = []
    synthesized = 0
    try:
        for index, row in enumerate(read_rows(path)):
            incident, resolved = normalize_row(row, index, resolver, load_time)
            incidents.append(incident)
            if not resolved:
                synthesized += 1
    except (OSError, csv.Error) as e:
        raise IncidentLoadError(f"Failed to read incidents from {path}: {e}") from e

    dt = (time.perf_counter() - t0) * 1000
    logger.info(
        f"Parsed {len(incidents)} incidents from {Path(path).name} in {dt:.0f}ms "
        f"({synthesized} with synthesized coordinates)"
    )
    return tuple(incidents)
