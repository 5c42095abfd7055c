"""
Content Repository.

Read-only queries over the channel hierarchy, the content tree, templates
and the weather / election / school-closing tables.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from tickerfeed.database.models import (
    BallotMeasure,
    BallotMeasureResult,
    Candidate,
    CandidateResult,
    ContentNode,
    FeedNode,
    GeographicDivision,
    ItemField,
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

logger = logging.getLogger(__name__)


class ContentRepository:
    """
    Query interface used by the renderer and component processors.

    Usage:
        repo = ContentRepository(session)
        channel = repo.get_node_by_name_and_type("News", NodeType.CHANNEL)
        playlists = repo.get_children(channel.id, NodeType.PLAYLIST)
    """

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Channel hierarchy and content tree
    # ------------------------------------------------------------------

    def get_node_by_name_and_type(self, name: str, node_type: str) -> Optional[FeedNode]:
        stmt = (
            select(FeedNode)
            .where(FeedNode.name == name, FeedNode.type == node_type)
            .order_by(FeedNode.order_index, FeedNode.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def get_children(
        self,
        parent_id: str,
        node_type: str,
        active_only: bool = True,
    ) -> list[FeedNode]:
        """
        Get child nodes of a channel hierarchy node, in display order.

        Args:
            parent_id: Parent node ID
            node_type: Child type ("playlist" or "bucket")
            active_only: Only return rows with ``active`` set
        """
        stmt = select(FeedNode).where(
            FeedNode.parent_id == parent_id,
            FeedNode.type == node_type,
        )
        if active_only:
            stmt = stmt.where(FeedNode.active.is_(True))
        stmt = stmt.order_by(FeedNode.order_index, FeedNode.id)
        return list(self.session.execute(stmt).scalars().all())

    def get_content_node(self, node_id: str) -> Optional[ContentNode]:
        return self.session.get(ContentNode, node_id)

    def get_content_children(self, parent_id: str, active_only: bool = True) -> list[ContentNode]:
        """Get direct children of a content tree node, in display order."""
        stmt = select(ContentNode).where(ContentNode.parent_id == parent_id)
        if active_only:
            stmt = stmt.where(ContentNode.active.is_(True))
        stmt = stmt.order_by(ContentNode.order_index, ContentNode.id)
        return list(self.session.execute(stmt).scalars().all())

    def get_fields(self, item_id: str) -> list[ItemField]:
        stmt = select(ItemField).where(ItemField.item_id == item_id).order_by(ItemField.id)
        return list(self.session.execute(stmt).scalars().all())

    def get_template(self, template_id: Optional[str]) -> Optional[Template]:
        if not template_id:
            return None
        return self.session.get(Template, template_id)

    def get_template_form(self, template_id: Optional[str]) -> Optional[TemplateForm]:
        if not template_id:
            return None
        stmt = select(TemplateForm).where(TemplateForm.template_id == template_id)
        return self.session.execute(stmt).scalars().first()

    # ------------------------------------------------------------------
    # Weather
    # ------------------------------------------------------------------

    def get_weather_locations(self, location_ids: Iterable[str]) -> dict[str, WeatherLocation]:
        """Get locations keyed by ID."""
        ids = [str(i) for i in location_ids]
        if not ids:
            return {}
        stmt = select(WeatherLocation).where(WeatherLocation.id.in_(ids))
        return {loc.id: loc for loc in self.session.execute(stmt).scalars().all()}

    def get_weather_location(self, location_id: str) -> Optional[WeatherLocation]:
        return self.session.get(WeatherLocation, location_id)

    def get_latest_weather(self, location_id: str) -> Optional[WeatherCurrent]:
        stmt = (
            select(WeatherCurrent)
            .where(WeatherCurrent.location_id == location_id)
            .order_by(WeatherCurrent.fetched_at.desc(), WeatherCurrent.id.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def get_daily_forecasts(
        self,
        location_id: str,
        start: date,
        limit: int,
    ) -> list[WeatherDailyForecast]:
        """Get forecast days on or after ``start``, earliest first."""
        stmt = (
            select(WeatherDailyForecast)
            .where(
                WeatherDailyForecast.location_id == location_id,
                WeatherDailyForecast.forecast_date >= start,
            )
            .order_by(WeatherDailyForecast.forecast_date)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all())

    # ------------------------------------------------------------------
    # Elections
    # ------------------------------------------------------------------

    def get_race_results(self, election_id: str, region_id: Optional[str] = None) -> list[RaceResult]:
        """
        Get race results for an election with races, divisions, candidates
        and parties loaded.

        Args:
            election_id: Election primary key
            region_id: Optional division code (state) filter, case-insensitive
        """
        stmt = (
            select(RaceResult)
            .join(Race, RaceResult.race_id == Race.id)
            .where(Race.election_id == election_id)
            .options(
                selectinload(RaceResult.race).selectinload(Race.division),
                selectinload(RaceResult.candidate_results)
                .selectinload(CandidateResult.candidate)
                .selectinload(Candidate.party),
            )
            .order_by(RaceResult.id)
        )
        if region_id:
            stmt = stmt.join(GeographicDivision, Race.division_id == GeographicDivision.id).where(
                GeographicDivision.code == region_id.upper()
            )
        return list(self.session.execute(stmt).scalars().all())

    def get_race_candidates(self, race_ids: Iterable[str]) -> dict[tuple[str, str], RaceCandidate]:
        """Get ballot entries keyed by (race_id, candidate_id)."""
        ids = list(race_ids)
        if not ids:
            return {}
        stmt = select(RaceCandidate).where(RaceCandidate.race_id.in_(ids))
        return {
            (rc.race_id, rc.candidate_id): rc
            for rc in self.session.execute(stmt).scalars().all()
        }

    def get_ballot_measure_results(
        self,
        election_id: str,
        region_id: Optional[str] = None,
    ) -> list[BallotMeasureResult]:
        """Get ballot measure results for an election, in stored order."""
        stmt = (
            select(BallotMeasureResult)
            .join(BallotMeasure, BallotMeasureResult.measure_id == BallotMeasure.id)
            .where(BallotMeasure.election_id == election_id)
            .options(selectinload(BallotMeasureResult.measure))
            .order_by(BallotMeasureResult.id)
        )
        if region_id:
            stmt = stmt.join(
                GeographicDivision, BallotMeasure.division_id == GeographicDivision.id
            ).where(GeographicDivision.code == region_id.upper())
        return list(self.session.execute(stmt).scalars().all())

    # ------------------------------------------------------------------
    # School closings
    # ------------------------------------------------------------------

    def get_school_closings(
        self,
        region_id: Optional[str] = None,
        zone_id: Optional[str] = None,
    ) -> list[SchoolClosing]:
        """Get closings, newest first, optionally filtered by region and zone."""
        stmt = select(SchoolClosing)
        if region_id:
            stmt = stmt.where(SchoolClosing.region_id == region_id)
        if zone_id:
            stmt = stmt.where(SchoolClosing.zone_id == zone_id)
        stmt = stmt.order_by(SchoolClosing.fetched_at.desc(), SchoolClosing.id)
        return list(self.session.execute(stmt).scalars().all())
