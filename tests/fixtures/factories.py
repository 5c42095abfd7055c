"""
Test Data Factories

Factory classes that add content, template and domain rows to a test
session. Rows are flushed, never committed.
"""

import random
import string
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from tickerfeed.database.models import (
    BallotMeasure,
    BallotMeasureResult,
    Candidate,
    CandidateResult,
    ContentNode,
    Election,
    FeedNode,
    GeographicDivision,
    ItemField,
    NodeType,
    Party,
    Race,
    RaceCandidate,
    RaceResult,
    SchoolClosing,
    Template,
    TemplateForm,
    WeatherCurrent,
    WeatherDailyForecast,
    WeatherLocation,
)


class BaseFactory:
    """Base factory class."""

    _counter = 0

    @classmethod
    def _next_id(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def _random_string(cls, length: int = 8) -> str:
        return "".join(random.choices(string.ascii_letters, k=length))

    @staticmethod
    def _save(session: Session, obj: Any) -> Any:
        session.add(obj)
        session.flush()
        return obj


class ChannelFactory(BaseFactory):
    """Channel / playlist / bucket nodes."""

    @classmethod
    def create(cls, session: Session, name: Optional[str] = None, **kwargs) -> FeedNode:
        """Create a channel."""
        return cls._save(
            session,
            FeedNode(
                type=NodeType.CHANNEL,
                name=name or f"Channel {cls._random_string()}",
                order_index=kwargs.get("order_index", 0),
                active=kwargs.get("active", True),
                schedule=kwargs.get("schedule"),
                timezone=kwargs.get("timezone"),
            ),
        )

    @classmethod
    def create_playlist(
        cls,
        session: Session,
        channel: FeedNode,
        name: Optional[str] = None,
        **kwargs,
    ) -> FeedNode:
        """Create a playlist under a channel."""
        return cls._save(
            session,
            FeedNode(
                parent_id=channel.id,
                type=NodeType.PLAYLIST,
                name=name or f"Playlist {cls._random_string()}",
                order_index=kwargs.get("order_index", cls._next_id()),
                active=kwargs.get("active", True),
                schedule=kwargs.get("schedule"),
                playlist_type=kwargs.get("playlist_type"),
            ),
        )

    @classmethod
    def create_bucket(
        cls,
        session: Session,
        playlist: FeedNode,
        content: Optional[ContentNode] = None,
        name: Optional[str] = None,
        **kwargs,
    ) -> FeedNode:
        """Create a bucket under a playlist, linked to a content root."""
        return cls._save(
            session,
            FeedNode(
                parent_id=playlist.id,
                type=NodeType.BUCKET,
                name=name or f"Bucket {cls._random_string()}",
                order_index=kwargs.get("order_index", cls._next_id()),
                active=kwargs.get("active", True),
                schedule=kwargs.get("schedule"),
                content_id=content.id if content is not None else kwargs.get("content_id"),
            ),
        )


class TemplateFactory(BaseFactory):
    """Templates and form schemas."""

    @classmethod
    def create(
        cls,
        session: Session,
        name: Optional[str] = None,
        components: Optional[list[dict[str, Any]]] = None,
    ) -> Template:
        """Create a template, with a form schema when components are given."""
        template = cls._save(session, Template(name=name or f"TEMPLATE_{cls._next_id()}"))
        if components is not None:
            cls._save(
                session,
                TemplateForm(template_id=template.id, form_schema={"components": components}),
            )
        return template


class ContentFactory(BaseFactory):
    """Content tree nodes and item fields."""

    @classmethod
    def create_root(
        cls,
        session: Session,
        name: Optional[str] = None,
        config: Optional[dict[str, Any]] = None,
    ) -> ContentNode:
        """Create a content tree root referenced by buckets."""
        return cls._save(
            session,
            ContentNode(
                type=NodeType.BUCKET,
                name=name or f"Content {cls._random_string()}",
                config=config,
            ),
        )

    @classmethod
    def create_folder(cls, session: Session, parent: ContentNode, **kwargs) -> ContentNode:
        """Create an item folder."""
        return cls._save(
            session,
            ContentNode(
                parent_id=parent.id,
                type=NodeType.ITEM_FOLDER,
                name=kwargs.get("name", f"Folder {cls._random_string()}"),
                order_index=kwargs.get("order_index", cls._next_id()),
                active=kwargs.get("active", True),
                schedule=kwargs.get("schedule"),
            ),
        )

    @classmethod
    def create_item(
        cls,
        session: Session,
        parent: ContentNode,
        fields: Optional[dict[str, Optional[str]]] = None,
        template: Optional[Template] = None,
        **kwargs,
    ) -> ContentNode:
        """Create an item with its fields, in the given order."""
        item = cls._save(
            session,
            ContentNode(
                parent_id=parent.id,
                type=NodeType.ITEM,
                name=kwargs.get("name", f"Item {cls._random_string()}"),
                order_index=kwargs.get("order_index", cls._next_id()),
                active=kwargs.get("active", True),
                schedule=kwargs.get("schedule"),
                template_id=template.id if template is not None else None,
                duration=kwargs.get("duration"),
            ),
        )
        for name, value in (fields or {}).items():
            cls._save(session, ItemField(item_id=item.id, name=name, value=value))
        return item


class WeatherFactory(BaseFactory):
    """Weather locations and readings."""

    @classmethod
    def create_location(cls, session: Session, name: str = "Springfield", **kwargs) -> WeatherLocation:
        location = WeatherLocation(
            name=name,
            custom_name=kwargs.get("custom_name"),
            admin1=kwargs.get("admin1", "Illinois"),
            country=kwargs.get("country", "US"),
        )
        if kwargs.get("id"):
            location.id = kwargs["id"]
        return cls._save(session, location)

    @classmethod
    def create_current(
        cls,
        session: Session,
        location: WeatherLocation,
        temperature: Optional[float],
        unit: str = "°F",
        fetched_at: Optional[datetime] = None,
        **kwargs,
    ) -> WeatherCurrent:
        return cls._save(
            session,
            WeatherCurrent(
                location_id=location.id,
                temperature_value=temperature,
                temperature_unit=unit,
                summary=kwargs.get("summary"),
                icon=kwargs.get("icon"),
                weather_code=kwargs.get("weather_code"),
                fetched_at=fetched_at or datetime(2024, 6, 12, 14, 0),
            ),
        )

    @classmethod
    def create_forecast(
        cls,
        session: Session,
        location: WeatherLocation,
        forecast_date: date,
        high: Optional[float],
        low: Optional[float],
        unit: str = "°F",
        **kwargs,
    ) -> WeatherDailyForecast:
        return cls._save(
            session,
            WeatherDailyForecast(
                location_id=location.id,
                forecast_date=forecast_date,
                temp_max_value=high,
                temp_max_unit=unit,
                temp_max_f=kwargs.get("high_f"),
                temp_min_value=low,
                temp_min_unit=unit,
                temp_min_f=kwargs.get("low_f"),
            ),
        )


class ElectionFactory(BaseFactory):
    """Elections, races, candidates and ballot measures."""

    @classmethod
    def create_election(cls, session: Session, name: str = "General Election") -> Election:
        return cls._save(session, Election(name=name, year=2024))

    @classmethod
    def create_division(cls, session: Session, code: str, fips_code: Optional[str] = None) -> GeographicDivision:
        return cls._save(session, GeographicDivision(code=code, fips_code=fips_code, type="state"))

    @classmethod
    def create_party(cls, session: Session, abbreviation: str) -> Party:
        return cls._save(session, Party(name=abbreviation, abbreviation=abbreviation))

    @classmethod
    def create_race(
        cls,
        session: Session,
        election: Election,
        name: str,
        priority_level: int = 0,
        division: Optional[GeographicDivision] = None,
        **kwargs,
    ) -> tuple[Race, RaceResult]:
        """Create a race and its (empty) result row."""
        race = cls._save(
            session,
            Race(
                election_id=election.id,
                division_id=division.id if division is not None else None,
                name=name,
                display_name=kwargs.get("display_name"),
                race_id=kwargs.get("race_id"),
                priority_level=priority_level,
            ),
        )
        result = cls._save(
            session,
            RaceResult(
                race_id=race.id,
                percent_reporting=kwargs.get("percent_reporting"),
                percent_reporting_override=kwargs.get("percent_reporting_override"),
            ),
        )
        return race, result

    @classmethod
    def add_candidate(
        cls,
        session: Session,
        race_result: RaceResult,
        last_name: str,
        votes: int,
        party: Optional[Party] = None,
        **kwargs,
    ) -> Candidate:
        """Add a candidate with a result and a ballot entry."""
        candidate = cls._save(
            session,
            Candidate(
                first_name=kwargs.get("first_name", "Pat"),
                last_name=last_name,
                party_id=party.id if party is not None else None,
                incumbent=kwargs.get("incumbent", False),
            ),
        )
        cls._save(
            session,
            CandidateResult(
                race_result_id=race_result.id,
                candidate_id=candidate.id,
                votes=votes,
                vote_percentage=kwargs.get("vote_percentage"),
                winner=kwargs.get("winner", False),
                votes_override=kwargs.get("votes_override"),
                winner_override=kwargs.get("winner_override"),
            ),
        )
        cls._save(
            session,
            RaceCandidate(
                race_id=race_result.race_id,
                candidate_id=candidate.id,
                withdrew=kwargs.get("withdrew", False),
                withdrew_override=kwargs.get("withdrew_override"),
            ),
        )
        return candidate

    @classmethod
    def create_ballot_measure(
        cls,
        session: Session,
        election: Election,
        title: str,
        yes_votes: int,
        no_votes: int,
        **kwargs,
    ) -> BallotMeasure:
        measure = cls._save(
            session,
            BallotMeasure(
                election_id=election.id,
                title=title,
                number=kwargs.get("number"),
                type=kwargs.get("type"),
                measure_id=kwargs.get("measure_id"),
            ),
        )
        cls._save(
            session,
            BallotMeasureResult(
                measure_id=measure.id,
                yes_votes=yes_votes,
                no_votes=no_votes,
                yes_percentage=kwargs.get("yes_percentage"),
                no_percentage=kwargs.get("no_percentage"),
                percent_reporting=kwargs.get("percent_reporting"),
            ),
        )
        return measure


class SchoolClosingFactory(BaseFactory):
    """School closing rows."""

    @classmethod
    def create(
        cls,
        session: Session,
        organization_name: str,
        region_id: str = "R1",
        zone_id: str = "Z1",
        fetched_at: Optional[datetime] = None,
        **kwargs,
    ) -> SchoolClosing:
        return cls._save(
            session,
            SchoolClosing(
                organization_name=organization_name,
                region_id=region_id,
                region_name=kwargs.get("region_name"),
                zone_id=zone_id,
                zone_name=kwargs.get("zone_name"),
                status_description=kwargs.get("status_description"),
                status_day=kwargs.get("status_day"),
                city=kwargs.get("city"),
                county_name=kwargs.get("county_name"),
                state=kwargs.get("state"),
                fetched_at=fetched_at or datetime(2024, 6, 12, 6, cls._next_id() % 60),
            ),
        )
