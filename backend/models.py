"""Atlas Backend: Pydantic Models"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Incident(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = "No Title"
    description: str = "No Description"
    publishedDate: str
    latitude: float
    longitude: float
    newsType: str = "Unknown"
    involvedPersonsRole: str = "Unknown"
    location: str = "Unknown Location"
    keywords: tuple[str, ...] = ()
    impact: str = ""
    source: str = ""
    date_time: str = ""
    tone: str = ""
    quotes: str = ""
    publicReaction: str = ""
    pastEvents: str = ""
    futureImplications: str = ""
    mainSubject: str = ""
    dayOfWeek: str = ""
    imagesAndMedia: str = ""
    category: Optional[str] = None  # assigned at the HTTP boundary, never at load


class CountEntry(BaseModel):
    label: str
    count: int


class IncidentSummary(BaseModel):
    totalIncidents: int
    topNewsTypes: list[CountEntry]
    categories: list[CountEntry]
    topLocations: list[CountEntry]
    timeOfDay: list[CountEntry]
    byMonth: list[CountEntry]
    stale: bool = False


class CacheStatus(BaseModel):
    loaded: bool
    incidentCount: int = 0
    ageSeconds: Optional[float] = Field(default=None, ge=0)
    reloading: bool = False


class HealthResponse(BaseModel):
    status: str
    cache: CacheStatus
