"""
application.services.analysis - Plain-English analysis of regulatory items.

Tool-free text-generation features built around items the user already
has on screen:
    - summarize:          structured explainer for one item
    - ask_about_document: multi-turn Q&A over one document
    - draft_comment:      ready-to-submit public comment
    - synthesize:         cross-item analytical synthesis
    - open_for_comment:   documents currently accepting comments (no LLM)
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Optional

from regassist.application.dto import DocumentAnswer
from regassist.application.errors import model_errors
from regassist.domain.exceptions import InvalidRequestError
from regassist.domain.models import ConversationToken, OperationName, ToolInvocation
from regassist.domain.ports import ChatGatewayPort, RegulationsPort, ToolExecutorPort

logger = logging.getLogger(__name__)

OPEN_FOR_COMMENT_PAGE_SIZE = 10

# result type (collection or single) → (fetch operation, id argument)
_ENRICHMENT = {
    "documents": (OperationName.GET_DOCUMENT, "documentId"),
    "document": (OperationName.GET_DOCUMENT, "documentId"),
    "comments": (OperationName.GET_COMMENT, "commentId"),
    "comment": (OperationName.GET_COMMENT, "commentId"),
    "dockets": (OperationName.GET_DOCKET, "docketId"),
    "docket": (OperationName.GET_DOCKET, "docketId"),
}

_SUMMARY_PROMPT = """You are analyzing a U.S. federal regulatory document from Regulations.gov.

Document data:
{data}

Provide a structured plain-English analysis with exactly these sections (use **Section Title** format):

**Summary**
2-3 sentences explaining what this regulation/document is about in plain English.

**Key Points**
• 3-5 bullet points covering the most important aspects.

**Who Is Affected**
Which people, businesses, industries, or organizations are impacted?

**Important Dates**
Any deadlines, effective dates, comment periods, or compliance timelines. Say "None specified" if unavailable.

**Bottom Line**
One clear sentence: what does this mean in practice?

Use plain language. No legal jargon."""

_QA_INSTRUCTION = """You answer questions about a specific U.S. federal regulatory document. Be concise and clear. If the answer isn't in the data, say so and suggest where to find it.

Document:
{data}"""

_COMMENT_PROMPT = """You are helping a member of the public write a formal public comment for submission to the U.S. government via Regulations.gov.

REGULATION:
Title: {title}
Agency: {agency}
Document ID: {doc_id}
Type: {doc_type}
Comment Deadline: {deadline}

COMMENTER'S POSITION: {position}

COMMENTER'S BACKGROUND AND CONCERNS:
{perspective}

Write a formal public comment (250–400 words) that:
1. Opens with who the commenter is and their clear position
2. Provides substantive reasoning drawn from the commenter's perspective
3. If opposing or modifying, makes specific, actionable recommendations
4. Closes with a direct request to the agency

Write it as a final, ready-to-submit comment. No placeholders."""

_SYNTHESIS_PROMPT = """You are a regulatory analyst synthesizing multiple U.S. federal regulatory documents.

Search topic: "{topic}"
Result type: {result_type}

Documents:
{items}

Provide an analytical synthesis with **Section Title** headers:

**Regulatory Landscape**
What is the overall picture on this topic? Who are the key federal players?

**Key Themes & Trends**
What patterns emerge? What direction is regulation moving?

**Most Significant Items**
Which 1–2 documents matter most and why?

**Action Items**
What should someone tracking this topic do next? Any comment deadlines?

Be analytical — give insight beyond what you'd get reading each card individually."""


def format_deadline(comment_end_date: Optional[str]) -> str:
    """'March 5, 2024' for an ISO timestamp, 'see regulations.gov' when absent."""
    if not comment_end_date:
        return "see regulations.gov"
    try:
        parsed = datetime.fromisoformat(comment_end_date.replace("Z", "+00:00"))
    except ValueError:
        return comment_end_date
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def _synthesis_item(item: dict[str, Any]) -> dict[str, Any]:
    attributes = item.get("attributes") or {}
    return {
        "id": item.get("id"),
        "title": attributes.get("title"),
        "agency": attributes.get("agencyId"),
        "type": attributes.get("documentType"),
        "date": attributes.get("postedDate"),
        "docket": attributes.get("docketId"),
        "openForComment": attributes.get("openForComment"),
        "commentEndDate": attributes.get("commentEndDate"),
    }


class AnalysisService:
    """Summaries, Q&A, comment drafting and synthesis over regulatory items."""

    def __init__(
        self,
        gateway: ChatGatewayPort,
        executor: ToolExecutorPort,
        client: RegulationsPort,
    ):
        self._gateway = gateway
        self._executor = executor
        self._client = client

    async def summarize(self, item: dict[str, Any], result_type: Optional[str] = None) -> str:
        """Explain one item in plain English.

        The full record is fetched first when the result type maps to a
        fetch operation. Fallback: the caller's item is used as-is when the
        type is unknown, the item has no id, or the fetch fails.
        """
        if not item:
            raise InvalidRequestError("item is required")

        data = await self._enrich(item, result_type)
        with model_errors("summarize"):
            return await self._gateway.complete(
                _SUMMARY_PROMPT.format(data=json.dumps(data, indent=2))
            )

    async def ask_about_document(
        self,
        question: str,
        item: dict[str, Any],
        history: Optional[ConversationToken] = None,
    ) -> DocumentAnswer:
        """Answer a follow-up question about one document."""
        if not question or not item:
            raise InvalidRequestError("question and item are required")

        with model_errors("document Q&A"):
            reply = await self._gateway.send_message(
                history or ConversationToken.empty(),
                question,
                system_instruction=_QA_INSTRUCTION.format(data=json.dumps(item, indent=2)),
            )
        return DocumentAnswer(answer=reply.text, history=reply.history)

    async def draft_comment(
        self,
        document: dict[str, Any],
        position: str,
        perspective: str,
    ) -> str:
        """Write a formal public comment from the commenter's position."""
        if not document or not position or not perspective:
            raise InvalidRequestError("document, position, and perspective required")

        attributes = document.get("attributes") or {}
        prompt = _COMMENT_PROMPT.format(
            title=attributes.get("title") or "Unknown",
            agency=attributes.get("agencyId") or "Unknown",
            doc_id=document.get("id"),
            doc_type=attributes.get("documentType") or "Unknown",
            deadline=format_deadline(attributes.get("commentEndDate")),
            position=position,
            perspective=perspective,
        )
        with model_errors("draft comment"):
            return await self._gateway.complete(prompt)

    async def synthesize(
        self,
        items: list[dict[str, Any]],
        result_type: Optional[str] = None,
        original_query: Optional[str] = None,
    ) -> str:
        """Analytical synthesis across several items."""
        if not items:
            raise InvalidRequestError("items are required")

        prompt = _SYNTHESIS_PROMPT.format(
            topic=original_query or "regulatory search",
            result_type=result_type,
            items=json.dumps([_synthesis_item(i) for i in items], indent=2),
        )
        with model_errors("synthesize"):
            return await self._gateway.complete(prompt)

    async def open_for_comment(
        self,
        agency_id: Optional[str] = None,
        search_term: Optional[str] = None,
        page: int = 1,
    ) -> dict[str, Any]:
        """Documents whose comment period is open, soonest deadline first.

        Raises:
            UpstreamError: subclasses straight from the Regulations.gov client.
        """
        params: dict[str, Any] = {
            "filter[withinCommentPeriod]": "true",
            "page[number]": page,
            "page[size]": OPEN_FOR_COMMENT_PAGE_SIZE,
            "sort": "commentEndDate",
        }
        if agency_id:
            params["filter[agencyId]"] = agency_id
        if search_term:
            params["filter[searchTerm]"] = search_term
        return await self._client.get("/documents", params)

    async def _enrich(self, item: dict[str, Any], result_type: Optional[str]) -> dict[str, Any]:
        mapping = _ENRICHMENT.get(result_type or "")
        item_id = item.get("id")
        if mapping is None or not item_id:
            return item

        operation, id_field = mapping
        result = await self._executor.execute(
            ToolInvocation(name=operation.value, arguments={id_field: item_id})
        )
        full = result.payload.get("data") if result.ok and isinstance(result.payload, dict) else None
        if not full:
            logger.info("Enrichment fetch for %s gave no data, using supplied item", item_id)
            return item
        return full
