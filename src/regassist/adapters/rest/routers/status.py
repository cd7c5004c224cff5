"""Credential status endpoint."""

from fastapi import APIRouter, Depends

from regassist.adapters.rest.dependencies import get_factory
from regassist.adapters.rest.schemas import StatusOut
from regassist.factory import ServiceFactory

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/status", response_model=StatusOut)
async def status(factory: ServiceFactory = Depends(get_factory)):
    return StatusOut(**factory.config.credential_status())
