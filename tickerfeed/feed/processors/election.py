"""
Election component processor.

One election field expands into header elements, one element per race,
one element per ballot measure and footer elements, in that order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from tickerfeed.database.models import (
    BallotMeasureResult,
    Candidate,
    ItemField,
    RaceCandidate,
    RaceResult,
    effective,
)
from tickerfeed.feed.models import Element
from tickerfeed.feed.processors.base import (
    BaseProcessor,
    ComponentType,
    ItemReplacement,
    ProcessorContext,
    parse_json_value,
)
from tickerfeed.utils.text import format_number, format_percent, to_text

logger = logging.getLogger(__name__)

PRESIDENTIAL_PRIORITY = 10
MAX_RACE_CANDIDATES = 9

DEFAULT_RACE_TEMPLATE = "VOTE_{numCandidates}HEADS"
DEFAULT_PROPOSAL_TEMPLATE = "VOTE_PUBLIC_QUESTION"
DEFAULT_PARTY_MATERIAL_PREFIX = "MATERIAL*ONLINE_2019/N12/MASTER_CONTROL/ELECTIONS/"


@dataclass
class ElectionSettings:
    """Election component configuration stored in the field value."""

    election_id: Optional[str] = None
    region_id: str = ""
    show_party: bool = False
    show_incumbent_star: bool = False
    show_zero_votes: bool = False
    show_estimated_in: bool = True
    header_items: list[Any] = field(default_factory=list)
    footer_items: list[Any] = field(default_factory=list)
    presidential_template: str = ""
    race_template: str = DEFAULT_RACE_TEMPLATE
    proposal_template: str = DEFAULT_PROPOSAL_TEMPLATE
    party_material_prefix: str = DEFAULT_PARTY_MATERIAL_PREFIX

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ElectionSettings":
        def pick(key: str, default: Any) -> Any:
            value = data.get(key)
            return default if value is None else value

        header_items = data.get("headerItems")
        footer_items = data.get("footerItems")
        return cls(
            election_id=to_text(data.get("electionId")) or None,
            region_id=to_text(data.get("regionId")),
            show_party=bool(data.get("showParty", False)),
            show_incumbent_star=bool(data.get("showIncumbentStar", False)),
            show_zero_votes=bool(data.get("showZeroVotes", False)),
            show_estimated_in=bool(pick("showEstimatedIn", True)),
            header_items=header_items if isinstance(header_items, list) else [],
            footer_items=footer_items if isinstance(footer_items, list) else [],
            presidential_template=pick("presidentialTemplate", ""),
            race_template=pick("raceTemplate", DEFAULT_RACE_TEMPLATE),
            proposal_template=pick("proposalTemplate", DEFAULT_PROPOSAL_TEMPLATE),
            party_material_prefix=pick("partyMaterialPrefix", DEFAULT_PARTY_MATERIAL_PREFIX),
        )


@dataclass
class CandidateLine:
    """Candidate with override-resolved result values."""

    candidate: Candidate
    votes: int
    vote_percentage: float
    winner: bool
    incumbent: bool

    @property
    def party_abbreviation(self) -> str:
        party = self.candidate.party
        return (party.abbreviation or "") if party else ""


def sort_races(race_results: list[RaceResult]) -> list[RaceResult]:
    """Order races by priority level (highest first), then by name."""

    def key(result: RaceResult) -> tuple[int, str]:
        race = result.race
        priority = (race.priority_level or 0) if race else 0
        name = race.label if race else ""
        return (-priority, name.casefold())

    return sorted(race_results, key=key)


def template_from_entry(entry: dict[str, Any]) -> Optional[str]:
    """
    Resolve the template name of a header/footer entry.

    ``template`` may be a plain name or a ``{label, value}`` option;
    ``templateName`` is the older key.
    """
    template = entry.get("template")
    if template:
        if isinstance(template, dict):
            return template.get("value") or None
        if isinstance(template, str):
            return template
        return None
    return entry.get("templateName") or None


def order_presidential(lines: list[CandidateLine]) -> list[CandidateLine]:
    """Democrat first, Republican second; everyone else is dropped."""
    democrat = next((c for c in lines if c.party_abbreviation.upper() == "DEM"), None)
    republican = next(
        (c for c in lines if c.party_abbreviation.upper() in ("GOP", "REP")),
        None,
    )
    return [c for c in (democrat, republican) if c is not None]


class ElectionProcessor(BaseProcessor):
    """Builds election result elements from the ``e_*`` tables."""

    component_types = (ComponentType.ELECTION,)
    replaces_item = True

    def process(
        self,
        item_field: ItemField,
        component: dict[str, Any],
        context: ProcessorContext,
    ) -> ItemReplacement:
        data = parse_json_value(item_field.value)
        if not isinstance(data, dict):
            logger.error(f"Invalid election component value on item {context.item.id}")
            return ItemReplacement()

        settings = ElectionSettings.from_dict(data)
        if not settings.election_id:
            logger.warning(f"No electionId in election component on item {context.item.id}")
            return ItemReplacement()

        elements: list[Element] = []
        elements.extend(self._build_extra_items(settings.header_items, "header", context))
        elements.extend(self._build_races(settings, context))
        elements.extend(self._build_ballot_measures(settings, context))
        elements.extend(self._build_extra_items(settings.footer_items, "footer", context))

        logger.debug(f"Election item {context.item.id} produced {len(elements)} elements")
        return ItemReplacement(elements=elements)

    def _build_extra_items(
        self,
        entries: list[Any],
        kind: str,
        context: ProcessorContext,
    ) -> list[Element]:
        """Header or footer elements with fixed fields."""
        elements = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                continue
            template_name = template_from_entry(entry)
            if not template_name:
                continue

            element = Element(
                id=f"{context.item.id}_{kind}_{index}",
                template=template_name,
                duration=context.item_duration,
            )
            for field_def in entry.get("fields") or []:
                if isinstance(field_def, dict) and field_def.get("name") and field_def.get("value") is not None:
                    element.add_field(str(field_def["name"]), to_text(field_def["value"]))
            elements.append(element)
        return elements

    def _collect_candidates(
        self,
        race_result: RaceResult,
        race_candidates: dict[tuple[str, str], RaceCandidate],
    ) -> list[CandidateLine]:
        lines = []
        for result in race_result.candidate_results:
            candidate = result.candidate
            if candidate is None:
                continue

            entry = race_candidates.get((race_result.race_id, result.candidate_id))
            if entry is not None and entry.has_withdrawn:
                continue

            lines.append(
                CandidateLine(
                    candidate=candidate,
                    votes=effective(result.votes, result.votes_override) or 0,
                    vote_percentage=effective(result.vote_percentage, result.vote_percentage_override) or 0,
                    winner=bool(effective(result.winner, result.winner_override)),
                    incumbent=bool(effective(candidate.incumbent, candidate.incumbent_override)),
                )
            )
        return lines

    def _build_races(self, settings: ElectionSettings, context: ProcessorContext) -> list[Element]:
        repository = context.repository
        try:
            race_results = sort_races(
                repository.get_race_results(settings.election_id, settings.region_id or None)
            )
        except Exception as e:
            logger.error(f"Error fetching races for election {settings.election_id}: {e}")
            return []

        try:
            race_candidates = repository.get_race_candidates(
                [r.race_id for r in race_results if r.race_id]
            )
        except Exception as e:
            logger.error(f"Error fetching race candidates for election {settings.election_id}: {e}")
            race_candidates = {}

        elements = []
        for index, race_result in enumerate(race_results):
            race = race_result.race
            if race is None:
                continue

            is_presidential = race.priority_level == PRESIDENTIAL_PRIORITY
            lines = sorted(
                self._collect_candidates(race_result, race_candidates),
                key=lambda c: c.votes,
                reverse=True,
            )
            if not is_presidential:
                if not settings.show_zero_votes:
                    lines = [c for c in lines if c.votes > 0]
                lines = lines[:MAX_RACE_CANDIDATES]

            if is_presidential and settings.presidential_template:
                template_name = settings.presidential_template
                lines = order_presidential(lines)
            else:
                template_name = settings.race_template.replace("{numCandidates}", str(len(lines)))

            percent_reporting = race_result.effective_percent_reporting
            division = race.division

            element = Element(
                id=f"{context.item.id}_race_{index}",
                template=template_name,
                duration=context.item_duration,
            )
            element.add_field("raceId", race.race_id or str(race.id))
            element.add_field("raceName", race.label)
            element.add_field("district", (division.fips_code or "") if division else "")
            element.add_field("pctRpt", format_number(percent_reporting or 0))
            element.add_field("showParty", "1" if settings.show_party else "0")
            element.add_field("repOption", "1" if settings.show_estimated_in else "0")

            for number, line in enumerate(lines, start=1):
                abbreviation = line.party_abbreviation
                material = ""
                if settings.show_party and abbreviation:
                    material = f"{settings.party_material_prefix}{abbreviation.upper()}"

                last_name = line.candidate.last_name or ""
                if settings.show_incumbent_star and line.incumbent:
                    last_name += "*"

                element.add_field(f"partyColor{number}.material", material)
                element.add_field(f"partyTxt{number}", abbreviation)
                element.add_field(f"firstName{number}", line.candidate.first_name or "")
                element.add_field(f"lastName{number}", last_name)
                element.add_field(f"percent{number}", format_percent(line.vote_percentage))
                element.add_field(f"votes{number}", str(line.votes))
                element.add_field(f"rank{number}", str(number))
                element.add_field(f"winner{number}", "1" if line.winner else "0")

            elements.append(element)
        return elements

    def _build_ballot_measures(
        self,
        settings: ElectionSettings,
        context: ProcessorContext,
    ) -> list[Element]:
        try:
            results = context.repository.get_ballot_measure_results(
                settings.election_id, settings.region_id or None
            )
        except Exception as e:
            logger.error(f"Error fetching ballot measures for election {settings.election_id}: {e}")
            return []

        elements = []
        for index, result in enumerate(results):
            element = self._build_ballot_measure(result, index, settings, context)
            if element is not None:
                elements.append(element)
        return elements

    def _build_ballot_measure(
        self,
        result: BallotMeasureResult,
        index: int,
        settings: ElectionSettings,
        context: ProcessorContext,
    ) -> Optional[Element]:
        measure = result.measure
        if measure is None:
            return None

        yes_votes = result.yes_votes or 0
        no_votes = result.no_votes or 0

        if measure.number:
            measure_name = f"{measure.type or 'Measure'} {measure.number}: {measure.title}"
        else:
            measure_name = measure.title

        element = Element(
            id=f"{context.item.id}_ballot_measure_{index}",
            template=settings.proposal_template,
            duration=context.item_duration,
        )
        element.add_field("raceId", measure.measure_id or str(measure.id))
        element.add_field("raceName", measure_name or "")
        element.add_field("pctRpt", format_number(result.percent_reporting or 0))
        element.add_field("yesVotes", str(yes_votes))
        element.add_field("yesPercent", format_percent(result.yes_percentage))
        element.add_field("noVotes", str(no_votes))
        element.add_field("noPercent", format_percent(result.no_percentage))
        element.add_field("leading", "YES" if yes_votes > no_votes else "NO")
        return element
