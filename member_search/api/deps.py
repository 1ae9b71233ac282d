from typing import Generator, Optional
from fastapi import Query
from sqlalchemy.orm import Session
from ..db.session import SessionLocal
from ..schemas.search import MemberSearchCondition
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
def get_search_condition(
    username: Optional[str] = Query(None),
    team_name: Optional[str] = Query(None, alias="teamName"),
    age_goe: Optional[str] = Query(None, alias="ageGoe"),
    age_loe: Optional[str] = Query(None, alias="ageLoe"),
) -> MemberSearchCondition:
    # raw strings: empty means absent, a non-integer bound raises InvalidFilterError (400)
    return MemberSearchCondition.from_params(
        {"username": username, "teamName": team_name, "ageGoe": age_goe, "ageLoe": age_loe}
    )
