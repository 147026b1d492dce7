"""Search orchestration: wires interpreter, aggregator, and scorer.

Data flow:
  1. Requirement text -> RequirementSpec   (failures propagate, search is blocked)
  2. Handles -> CandidateProfiles          (concurrent, per-candidate failures reported)
  3. Spec + profiles -> ranked matches     (never fails, fallback guarantees scores)
"""

import json
import logging
from collections.abc import Iterable
from datetime import datetime

from talentscope.core.schemas import SearchReport
from talentscope.matching.scorer import CompatibilityScorer
from talentscope.profile.aggregator import ProfileAggregator
from talentscope.requirements.interpreter import RequirementInterpreter

logger = logging.getLogger(__name__)


async def run_search(
    requirement_text: str,
    handles: Iterable[str],
    interpreter: RequirementInterpreter,
    aggregator: ProfileAggregator,
    scorer: CompatibilityScorer,
) -> SearchReport:
    """Execute one search end to end and return the ranked report."""
    started_at = datetime.now()

    requirement = await interpreter.interpret_requirements(requirement_text)

    batch = await aggregator.build_profiles(handles)
    logger.info(
        "Profiles: %d built, %d failed", len(batch.profiles), len(batch.errors),
    )

    matches, mode = await scorer.score_with_mode(requirement, batch.profiles)
    logger.info("Scored %d candidates (%s path)", len(matches), mode)

    return SearchReport(
        requirement=requirement,
        matches=matches,
        profile_errors=batch.errors,
        scoring_mode=mode,
        started_at=started_at,
        finished_at=datetime.now(),
    )


def export_report_json(report: SearchReport) -> str:
    """Export a search report as a JSON string."""
    data = {
        "requirement": report.requirement.model_dump(),
        "scoring_mode": report.scoring_mode,
        "matches": [
            {
                "rank": rank,
                "username": m.handle,
                "score": m.score,
                "reasoning": m.reasoning,
                "strengths": m.strengths,
                "potential_concerns": m.concerns,
                "source": m.source,
            }
            for rank, m in enumerate(report.matches, start=1)
        ],
        "profile_errors": report.profile_errors,
    }
    return json.dumps(data, indent=2)
