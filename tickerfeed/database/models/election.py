"""
Election Database Models

Elections, races, candidates and ballot measures together with the result
rows the results importers maintain. Result tables carry nullable
``*_override`` columns that an operator can set to correct a feed value;
when set they win over the imported value.
"""

from typing import Any, Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tickerfeed.database.models.base import Base, TimestampMixin
from tickerfeed.database.models.content import new_id


def effective(value: Any, override: Any) -> Any:
    """Return ``override`` when it is set, otherwise ``value``."""
    return override if override is not None else value


class Election(Base, TimestampMixin):
    """An election event."""

    __tablename__ = "e_elections"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    election_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Election {self.name}>"


class GeographicDivision(Base):
    """State / county / district a race or measure belongs to."""

    __tablename__ = "e_geographic_divisions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    code: Mapped[str | None] = mapped_column(String(16), nullable=True, index=True)
    fips_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    type: Mapped[str | None] = mapped_column(String(32), nullable=True)


class Party(Base):
    """Political party."""

    __tablename__ = "e_parties"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    abbreviation: Mapped[str | None] = mapped_column(String(16), nullable=True)


class Race(Base, TimestampMixin):
    """
    A contest within an election.

    ``priority_level`` orders races on air; 10 marks the presidential race.
    """

    __tablename__ = "e_races"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    race_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    election_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("e_elections.id"),
        nullable=False,
        index=True,
    )
    division_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("e_geographic_divisions.id"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    office: Mapped[str | None] = mapped_column(String(255), nullable=True)
    priority_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    election: Mapped["Election"] = relationship("Election")
    division: Mapped[Optional["GeographicDivision"]] = relationship("GeographicDivision")

    @property
    def label(self) -> str:
        return self.display_name or self.name or ""

    def __repr__(self) -> str:
        return f"<Race {self.name}>"


class Candidate(Base):
    """A person standing in one or more races."""

    __tablename__ = "e_candidates"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    candidate_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    party_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("e_parties.id"),
        nullable=True,
    )
    incumbent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    incumbent_override: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    party: Mapped[Optional["Party"]] = relationship("Party")

    def __repr__(self) -> str:
        return f"<Candidate {self.full_name or self.last_name}>"


class RaceCandidate(Base):
    """Candidate entry on a race ballot; tracks withdrawals."""

    __tablename__ = "e_race_candidates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    race_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("e_races.id"),
        nullable=False,
        index=True,
    )
    candidate_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("e_candidates.id"),
        nullable=False,
    )
    withdrew: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    withdrew_override: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    @property
    def has_withdrawn(self) -> bool:
        return bool(effective(self.withdrew, self.withdrew_override))


class RaceResult(Base, TimestampMixin):
    """Reporting status of a race."""

    __tablename__ = "e_race_results"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    race_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("e_races.id"),
        nullable=False,
        index=True,
    )
    precincts_reporting: Mapped[int | None] = mapped_column(Integer, nullable=True)
    precincts_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
    percent_reporting: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_votes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    precincts_reporting_override: Mapped[int | None] = mapped_column(Integer, nullable=True)
    precincts_total_override: Mapped[int | None] = mapped_column(Integer, nullable=True)
    percent_reporting_override: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_votes_override: Mapped[int | None] = mapped_column(Integer, nullable=True)

    race: Mapped["Race"] = relationship("Race")
    candidate_results: Mapped[list["CandidateResult"]] = relationship(
        "CandidateResult",
        back_populates="race_result",
        order_by="CandidateResult.id",
    )

    @property
    def effective_percent_reporting(self) -> float | None:
        return effective(self.percent_reporting, self.percent_reporting_override)


class CandidateResult(Base):
    """Votes for one candidate in one race result."""

    __tablename__ = "e_candidate_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    race_result_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("e_race_results.id"),
        nullable=False,
        index=True,
    )
    candidate_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("e_candidates.id"),
        nullable=False,
    )
    votes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    vote_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    winner: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    votes_override: Mapped[int | None] = mapped_column(Integer, nullable=True)
    vote_percentage_override: Mapped[float | None] = mapped_column(Float, nullable=True)
    winner_override: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    race_result: Mapped["RaceResult"] = relationship(
        "RaceResult",
        back_populates="candidate_results",
    )
    candidate: Mapped[Optional["Candidate"]] = relationship("Candidate")


class BallotMeasure(Base, TimestampMixin):
    """A proposition or public question."""

    __tablename__ = "e_ballot_measures"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    measure_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    election_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("e_elections.id"),
        nullable=False,
        index=True,
    )
    division_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("e_geographic_divisions.id"),
        nullable=True,
    )
    number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    division: Mapped[Optional["GeographicDivision"]] = relationship("GeographicDivision")


class BallotMeasureResult(Base):
    """Yes/no tallies for a ballot measure."""

    __tablename__ = "e_ballot_measure_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    measure_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("e_ballot_measures.id"),
        nullable=False,
        index=True,
    )
    yes_votes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    no_votes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    yes_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    no_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    passed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    precincts_reporting: Mapped[int | None] = mapped_column(Integer, nullable=True)
    precincts_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
    percent_reporting: Mapped[float | None] = mapped_column(Float, nullable=True)

    measure: Mapped["BallotMeasure"] = relationship("BallotMeasure")
