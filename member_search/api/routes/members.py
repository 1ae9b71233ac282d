from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.errors import NonUniqueResultError
from ...schemas.member import MemberTeamDto, MemberTeamPage, MemberAgeStats, MemberOut
from ...schemas.search import MemberSearchCondition
from ...services.member_service import search, search_page, member_age_stats, find_by_username
from ..deps import get_db, get_search_condition

router = APIRouter()
router_v2 = APIRouter()


@router.get("", response_model=list[MemberTeamDto])
def search_members_v1(
    condition: MemberSearchCondition = Depends(get_search_condition),
    db: Session = Depends(get_db),
):
    return search(db, condition)


@router.get("/stats", response_model=MemberAgeStats)
def member_stats(
    condition: MemberSearchCondition = Depends(get_search_condition),
    db: Session = Depends(get_db),
):
    return member_age_stats(db, condition)


@router.get("/by-username/{username}", response_model=MemberOut)
def get_by_username(username: str, db: Session = Depends(get_db)):
    try:
        member = find_by_username(db, username)
    except NonUniqueResultError:
        raise HTTPException(409, f"More than one member is named {username!r}")
    if not member:
        raise HTTPException(404, "Member not found")
    return member


@router_v2.get("", response_model=MemberTeamPage)
def search_members_v2(
    condition: MemberSearchCondition = Depends(get_search_condition),
    offset: int = Query(0),
    limit: int | None = Query(None),
    db: Session = Depends(get_db),
):
    # default page size when unset, never more than the configured maximum;
    # negative values reach the executor and come back as InvalidPageError (400)
    limit = settings.DEFAULT_PAGE_SIZE if limit is None else min(limit, settings.MAX_PAGE_SIZE)
    page = search_page(db, condition, offset=offset, limit=limit)
    return MemberTeamPage(content=page.results, total=page.total, offset=page.offset, limit=page.limit)
