from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...schemas.search import MemberSearchCondition
from ...schemas.team import TeamAgeStats
from ...services.member_service import team_age_stats
from ..deps import get_db, get_search_condition

router = APIRouter()


@router.get("/age-stats", response_model=list[TeamAgeStats])
def age_stats(
    condition: MemberSearchCondition = Depends(get_search_condition),
    min_avg_age: float | None = Query(None, alias="minAvgAge"),
    db: Session = Depends(get_db),
):
    return team_age_stats(db, condition, min_avg_age=min_avg_age)
