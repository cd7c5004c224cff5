"""Personalized briefing endpoint."""

from fastapi import APIRouter, Depends

from regassist.adapters.rest.dependencies import get_factory
from regassist.adapters.rest.schemas import BriefingBody, BriefingOut
from regassist.factory import ServiceFactory

router = APIRouter(prefix="/api", tags=["briefing"])


@router.post("/profile-briefing", response_model=BriefingOut)
async def profile_briefing(
    body: BriefingBody,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_briefing_service()
    result = await service.build_briefing(body.description)
    return BriefingOut(briefing=result.narrative, items=result.items)
