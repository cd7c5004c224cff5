"""Conversational search and "load more" endpoints."""

from fastapi import APIRouter, Depends

from regassist.adapters.rest.dependencies import get_factory
from regassist.adapters.rest.schemas import ChatBody, ChatOut, LoadMoreBody, LoadMoreOut
from regassist.domain.models import ConversationToken
from regassist.factory import ServiceFactory

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatOut)
async def chat(
    body: ChatBody,
    factory: ServiceFactory = Depends(get_factory),
):
    orchestrator = factory.create_orchestrator()
    result = await orchestrator.answer(
        body.message, ConversationToken.from_list(body.history),
    )
    return ChatOut(
        response=result.text,
        results=result.result.to_dict() if result.result else None,
        pagination=result.pagination.to_dict() if result.pagination else None,
        history=result.history.to_list(),
    )


@router.post("/load-more", response_model=LoadMoreOut)
async def load_more(
    body: LoadMoreBody,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_pagination_service()
    result = await service.continue_pagination(body.toolName, body.toolInput)
    return LoadMoreOut(
        results=result.result.to_dict(),
        pagination=result.pagination.to_dict() if result.pagination else None,
    )
