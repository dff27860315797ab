"""Atlas Backend: Configuration & Constants"""

import os
from pathlib import Path
from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Load .env from project root (one level up from backend/)
load_dotenv(_PROJECT_ROOT / ".env")

# ── Incident source ──
INCIDENTS_CSV_PATH = os.environ.get(
    "INCIDENTS_CSV_PATH", str(_PROJECT_ROOT / "MERGED_FILE.csv")
)

# ── Cache ──
INCIDENT_CACHE_TTL = float(os.environ.get("INCIDENT_CACHE_TTL", "3600"))        # 1 hour
INCIDENT_RELOAD_TIMEOUT = float(os.environ.get("INCIDENT_RELOAD_TIMEOUT", "120"))

# ── Coordinate fallback (regional centroid + uniform jitter) ──
FALLBACK_LATITUDE = float(os.environ.get("FALLBACK_LATITUDE", "18.1124"))
FALLBACK_LONGITUDE = float(os.environ.get("FALLBACK_LONGITUDE", "79.0193"))
FALLBACK_JITTER_DEGREES = float(os.environ.get("FALLBACK_JITTER_DEGREES", "0.75"))
_seed = os.environ.get("COORDINATE_SEED", "")
COORDINATE_SEED = int(_seed) if _seed.strip() else None

# ── HTTP ──
_origins = os.environ.get("CORS_ORIGINS", "")
CORS_ORIGINS = [o.strip() for o in _origins.split(",") if o.strip()] or [
    f"http://localhost:{p}" for p in range(3000, 3010)
] + [
    f"http://127.0.0.1:{p}" for p in range(3000, 3010)
]

# Source CSV column → Incident field
COLUMN_MAP = {
    "id": "Source_file",
    "title": "Common_Features_headline",
    "description": "Common_Features_summary",
    "publishedDate": "Published_Date",
    "newsType": "News_Type",
    "involvedPersonsRole": "Involved_persons_role",
    "location": "Common_Features_incident_location_place",
    "keywords": "Common_Features_keywords",
    "impact": "Common_Features_impact_and_significance",
    "source": "Common_Features_source",
    "date_time": "Common_Features_date_time",
    "tone": "Common_Features_tone_of_news",
    "quotes": "Common_Features_quotes_and_statements",
    "publicReaction": "Common_Features_public_reaction",
    "pastEvents": "Common_Features_references_to_past_events",
    "futureImplications": "Common_Features_conclusion_and_future_implications",
    "mainSubject": "Common_Features_main_subject",
    "dayOfWeek": "Common_Features_day_of_week",
    "imagesAndMedia": "Common_Features_images_and_media",
}
COORDINATE_COLUMN = "Common_Features_incident_location"

# News type → dashboard category. Lookup is exact after lower() + strip().
CATEGORY_KEYWORDS = {
    "Violent Crime": [
        "murder", "homicide", "assault", "kidnapping", "sexual harassment",
        "child abuse", "domestic violence", "custodial deaths", "mob violence",
    ],
    "Property Crime": [
        "theft", "burglary", "housebreaking", "smuggling",
        "property / real estate frauds", "vehicle-related frauds",
    ],
    "Drug-Related": [
        "drug trafficking", "drug possession", "drug distribution",
        "narcotics", "drug seizure",
    ],
    "Cyber Crime": [
        "cyberbullying", "online fraud", "cyber attack",
        "mobile sim card frauds", "document & identity frauds",
    ],
    "Financial Crime": [
        "corruption", "money laundering", "racketeering", "extortion", "syndicate",
        "investment frauds", "financial / banking frauds", "business / corporate frauds",
        "education / degree frauds", "immigration / visa frauds",
        "employment / job-related frauds", "matrimonial / relationship frauds",
        "cheating in overseas job offers", "misuse of funds",
    ],
    "Political": [
        "protest", "religious conflict", "court cases", "arrest", "abuse of power",
        "cabinet reshuffle", "national security policy",
        "state vs. central government disputes", "political party",
        "policy announcement", "election campaign", "party switching",
    ],
    "Accident/Hazard": [
        "accident", "fatal accident", "road accident", "health hazard",
        "medical malpractice", "utility failure", "drunk and drive",
    ],
    "Community Issue": [
        "child labor", "municipal issues", "local development", "village news",
        "farmer issues", "social awareness", "inspection",
    ],
    "Cultural/Social": [
        "festival", "cultural program", "sports event", "awards and achievements",
        "sympathy and condolence",
    ],
}
DEFAULT_CATEGORY = "Other"
