"""Summaries, document Q&A, comment drafting, synthesis and open comment periods."""

from typing import Optional

from fastapi import APIRouter, Depends

from regassist.adapters.rest.dependencies import get_factory
from regassist.adapters.rest.schemas import (
    DocumentQABody,
    DocumentQAOut,
    DraftCommentBody,
    SummarizeBody,
    SynthesizeBody,
)
from regassist.domain.models import ConversationToken
from regassist.factory import ServiceFactory

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post("/summarize")
async def summarize(
    body: SummarizeBody,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_analysis_service()
    summary = await service.summarize(body.item, body.resultType)
    return {"summary": summary}


@router.post("/document-qa", response_model=DocumentQAOut)
async def document_qa(
    body: DocumentQABody,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_analysis_service()
    result = await service.ask_about_document(
        body.question, body.item, ConversationToken.from_list(body.qaHistory),
    )
    return DocumentQAOut(answer=result.answer, qaHistory=result.history.to_list())


@router.post("/draft-comment")
async def draft_comment(
    body: DraftCommentBody,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_analysis_service()
    comment = await service.draft_comment(body.document, body.position, body.perspective)
    return {"comment": comment}


@router.get("/open-for-comment")
async def open_for_comment(
    agencyId: Optional[str] = None,
    searchTerm: Optional[str] = None,
    page: int = 1,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_analysis_service()
    return await service.open_for_comment(agencyId, searchTerm, page)


@router.post("/synthesize")
async def synthesize(
    body: SynthesizeBody,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_analysis_service()
    synthesis = await service.synthesize(body.items, body.resultType, body.originalQuery)
    return {"synthesis": synthesis}
