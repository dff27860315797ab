"""Pytest configuration and shared fixtures for the Atlas backend tests.

Provides a sample merged-news CSV writer, a controllable clock, and an
Incident factory used across unit and integration tests.
"""
import csv
from pathlib import Path
from typing import Any, Dict, List

import pytest

from models import Incident


CSV_HEADER = [
    "Source_file",
    "Common_Features_headline",
    "Common_Features_summary",
    "Published_Date",
    "Common_Features_incident_location",
    "News_Type",
    "Involved_persons_role",
    "Common_Features_incident_location_place",
    "Common_Features_keywords",
    "Common_Features_impact_and_significance",
    "Common_Features_source",
    "Common_Features_date_time",
    "Common_Features_tone_of_news",
    "Common_Features_quotes_and_statements",
    "Common_Features_public_reaction",
    "Common_Features_references_to_past_events",
    "Common_Features_conclusion_and_future_implications",
    "Common_Features_main_subject",
    "Common_Features_day_of_week",
    "Common_Features_images_and_media",
]


class FakeClock:
    """Callable clock whose time only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sample_rows() -> List[Dict[str, str]]:
    """Rows covering good, partial and broken records."""
    return [
        {
            "Source_file": "news_001.txt",
            "Common_Features_headline": "Chain snatching near bus stand",
            "Common_Features_summary": "Two men on a bike snatched a chain.",
            "Published_Date": "2024-01-01T00:00:00Z",
            "Common_Features_incident_location": '"17.5,78.3"',
            "News_Type": "Theft",
            "Involved_persons_role": "Victim",
            "Common_Features_incident_location_place": '"Warangal"',
            "Common_Features_keywords": "theft; chain ;  ",
        },
        {
            "Source_file": "news_002.txt",
            "Common_Features_headline": "Farmer protest at collectorate",
            "Published_Date": "2024-01-31T23:59:59Z",
            "Common_Features_incident_location": "0,0",
            "News_Type": "Protest",
        },
        {
            "Source_file": "",
            "Common_Features_headline": "",
            "Published_Date": "2024-02-10T14:30:00Z",
            "Common_Features_incident_location": "not a place",
            "News_Type": "murder",
            "Common_Features_incident_location_place": "Karimnagar",
        },
    ]


@pytest.fixture
def write_csv(tmp_path):
    """Factory writing rows (missing columns left blank) to a CSV file."""
    def _write(rows: List[Dict[str, Any]], name: str = "MERGED_FILE.csv") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_HEADER)
            writer.writeheader()
            for row in rows:
                writer.writerow({col: row.get(col, "") for col in CSV_HEADER})
        return path
    return _write


@pytest.fixture
def sample_csv(write_csv, sample_rows) -> Path:
    return write_csv(sample_rows)


@pytest.fixture
def incident_factory():
    """Factory for Incident values with mappable defaults."""
    def _create(incident_id: str, **overrides) -> Incident:
        fields = {
            "id": incident_id,
            "publishedDate": "2024-01-15T10:00:00Z",
            "latitude": 17.5,
            "longitude": 78.3,
            "newsType": "Theft",
        }
        fields.update(overrides)
        return Incident(**fields)
    return _create
