"""Atlas Backend: News type → dashboard category"""

from config import CATEGORY_KEYWORDS, DEFAULT_CATEGORY
from models import Incident

_CATEGORY_LOOKUP: dict[str, str] = {
    keyword: category
    for category, keywords in CATEGORY_KEYWORDS.items()
    for keyword in keywords
}

CATEGORIES: list[str] = list(CATEGORY_KEYWORDS) + [DEFAULT_CATEGORY]


def categorize(news_type: str) -> str:
    return _CATEGORY_LOOKUP.get((news_type or "").strip().lower(), DEFAULT_CATEGORY)


def with_category(incident: Incident) -> Incident:
    """Copy of the incident with ``category`` filled in. The input is untouched."""
    return incident.model_copy(update={"category": categorize(incident.newsType)})
