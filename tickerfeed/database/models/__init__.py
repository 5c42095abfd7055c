"""
TickerFeed Database Models

SQLAlchemy models for all entities read by the feed renderer:
- Channel hierarchy and authored content tree
- Templates and their form schemas
- Weather, election and school-closing domain tables
"""

from tickerfeed.database.models.base import Base, TimestampMixin
from tickerfeed.database.models.content import (
    ContentNode,
    FeedNode,
    ItemField,
    NodeType,
    Template,
    TemplateForm,
    new_id,
)
from tickerfeed.database.models.election import (
    BallotMeasure,
    BallotMeasureResult,
    Candidate,
    CandidateResult,
    Election,
    GeographicDivision,
    Party,
    Race,
    RaceCandidate,
    RaceResult,
    effective,
)
from tickerfeed.database.models.school_closings import SchoolClosing
from tickerfeed.database.models.weather import (
    WeatherCurrent,
    WeatherDailyForecast,
    WeatherLocation,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "new_id",
    # Content
    "ContentNode",
    "FeedNode",
    "ItemField",
    "NodeType",
    "Template",
    "TemplateForm",
    # Election
    "BallotMeasure",
    "BallotMeasureResult",
    "Candidate",
    "CandidateResult",
    "Election",
    "GeographicDivision",
    "Party",
    "Race",
    "RaceCandidate",
    "RaceResult",
    "effective",
    # School closings
    "SchoolClosing",
    # Weather
    "WeatherCurrent",
    "WeatherDailyForecast",
    "WeatherLocation",
]
