from fastapi import APIRouter
from . import members, teams

router = APIRouter()

router.include_router(members.router, prefix="/v1/members", tags=["Members"])
router.include_router(members.router_v2, prefix="/v2/members", tags=["Members"])
router.include_router(teams.router, prefix="/v1/teams", tags=["Teams"])
