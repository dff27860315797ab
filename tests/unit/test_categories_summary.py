"""Unit tests for news type categorization and dashboard aggregates."""
import pytest

from categories import CATEGORIES, categorize, with_category
from summary import summarize, time_of_day


@pytest.mark.unit
class TestCategorize:

    @pytest.mark.parametrize("news_type,expected", [
        ("Murder", "Violent Crime"),
        ("  theft ", "Property Crime"),
        ("Drug Seizure", "Drug-Related"),
        ("Online Fraud", "Cyber Crime"),
        ("Money Laundering", "Financial Crime"),
        ("Protest", "Political"),
        ("Road Accident", "Accident/Hazard"),
        ("Village News", "Community Issue"),
        ("Festival", "Cultural/Social"),
        ("Vehicle Theft", "Other"),
        ("", "Other"),
    ])
    def test_lookup(self, news_type, expected):
        assert categorize(news_type) == expected

    def test_ten_buckets(self):
        assert len(CATEGORIES) == 10
        assert CATEGORIES[-1] == "Other"

    def test_with_category_copies(self, incident_factory):
        incident = incident_factory("x", newsType="Arrest")
        tagged = with_category(incident)
        assert tagged.category == "Political"
        assert incident.category is None
        assert tagged.id == incident.id


@pytest.mark.unit
class TestSummarize:

    @pytest.mark.parametrize("published,expected", [
        ("2024-01-01T05:00:00Z", "Morning (5AM-12PM)"),
        ("2024-01-01T12:00:00Z", "Afternoon (12PM-5PM)"),
        ("2024-01-01T20:59:00Z", "Evening (5PM-9PM)"),
        ("2024-01-01T04:59:00Z", "Night (9PM-5AM)"),
        ("not a date", "Unknown"),
    ])
    def test_time_of_day(self, published, expected):
        assert time_of_day(published) == expected

    def test_counts(self, incident_factory):
        incidents = [
            incident_factory("1", newsType="Theft", location="Warangal", publishedDate="2024-01-02T06:00:00Z"),
            incident_factory("2", newsType="Theft", location="Warangal", publishedDate="2024-01-09T13:00:00Z"),
            incident_factory("3", newsType="Murder", location="Unknown Location",
                             latitude=18.12346, longitude=79.01234, publishedDate="2024-02-01T22:00:00Z"),
            incident_factory("4", newsType="Festival", location="Nizamabad", publishedDate="garbage"),
        ]

        summary = summarize(incidents)

        assert summary.totalIncidents == 4
        assert summary.topNewsTypes[0].label == "Theft"
        assert summary.topNewsTypes[0].count == 2
        assert {e.label: e.count for e in summary.topLocations} == {
            "Warangal": 2, "18.1235,79.0123": 1, "Nizamabad": 1,
        }
        categories = {e.label: e.count for e in summary.categories}
        assert categories["Property Crime"] == 2
        assert categories["Violent Crime"] == 1
        assert categories["Cultural/Social"] == 1
        assert categories["Other"] == 0
        periods = {e.label: e.count for e in summary.timeOfDay}
        assert periods["Unknown"] == 1
        assert periods["Night (9PM-5AM)"] == 1
        assert [(e.label, e.count) for e in summary.byMonth] == [("2024-01", 2), ("2024-02", 1)]
        assert summary.stale is False

    def test_empty(self):
        summary = summarize([])
        assert summary.totalIncidents == 0
        assert summary.topNewsTypes == []
        assert sum(e.count for e in summary.categories) == 0
