"""POST /v1/matches/rank - Rank the partner catalog for an ad-hoc profile"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lendmatch.api.v1.schemas import MatchResultSchema, RankRequest, RankResponse
from lendmatch.api.dependencies import get_scoring_variant
from lendmatch.domain.models import ApplicantProfile, ScoringVariant
from lendmatch.domain.ranking import rank_partner_results
from lendmatch.infrastructure.database.repositories import PartnerRepository
from lendmatch.infrastructure.database.session import get_db
from lendmatch.infrastructure.observability.metrics import record_ranking

router = APIRouter()


@router.post("/matches/rank", response_model=RankResponse)
def rank_profile(
    request_body: RankRequest,
    db: Session = Depends(get_db),
    default_variant: ScoringVariant = Depends(get_scoring_variant),
):
    """
    Score a profile against the active catalog without creating a lead.

    An empty result means no partner qualifies; it is not an error.
    """
    variant = ScoringVariant(request_body.scoring_variant) if request_body.scoring_variant else default_variant
    profile = ApplicantProfile(**request_body.model_dump(exclude={"scoring_variant"}))

    results = rank_partner_results(profile, PartnerRepository(db).active_catalog(), variant)
    record_ranking(len(results), results[0].score if results else 0)

    return RankResponse(
        scoring_variant=variant.value,
        matches=[MatchResultSchema(partner_id=r.partner_id, score=r.score) for r in results],
    )
