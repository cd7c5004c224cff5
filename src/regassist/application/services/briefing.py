"""
application.services.briefing - Personalized regulatory briefing pipeline.

Orchestrates the 3-stage flow:
    1. Query expansion (LLM): description → three focused search phrases
    2. Parallel fetch: one search_documents per phrase, first 4 items each
    3. Merge & synthesize: deduplicate by id, then narrate a briefing (LLM)

All methods are async. Dependencies are injected via constructor.
Stateless per call.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Iterable

from regassist.application.dto import BriefingResult
from regassist.application.errors import model_errors
from regassist.domain.exceptions import InvalidRequestError
from regassist.domain.models import OperationName, ToolInvocation, ToolResult
from regassist.domain.ports import ChatGatewayPort, ToolExecutorPort

logger = logging.getLogger(__name__)

MAX_QUERIES = 3
ITEMS_PER_QUERY = 4
FALLBACK_QUERY_CHARS = 60

_CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```")

_EXPANSION_PROMPT = """Based on this description: "{description}"

Generate exactly 3 specific Regulations.gov search queries most relevant to this person/org. Return ONLY a valid JSON array of 3 strings, nothing else.
Example: ["food safety labeling small business","restaurant sanitation FDA","food manufacturing permits"]"""

_BRIEFING_PROMPT = """Create a personalized U.S. federal regulatory briefing.

Person/Organization: "{description}"

Most relevant regulations found:
{items}

Write a personalized briefing (3–4 paragraphs) using **Section Title** headers:

**Your Regulatory Landscape**
Which federal agencies and areas are most relevant to you and why.

**Key Regulations to Know**
The most important items from the list and what they mean for you specifically.

**Time-Sensitive Items**
Any open-for-comment periods, upcoming deadlines, or urgent actions.

**Your Next Steps**
2–3 concrete actions to take. Be specific and actionable. Write directly to the user ("you/your")."""


def parse_queries(text: str, description: str) -> list[str]:
    """Parse the model's JSON array of search phrases, leniently.

    Code fences are stripped first. Fallback: a single query made of the
    first 60 characters of the description, used when the text is not
    JSON, not a list, or holds no non-empty strings.
    """
    fallback = [description[:FALLBACK_QUERY_CHARS]]
    cleaned = _CODE_FENCE.sub("", (text or "").strip()).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.info("Query expansion returned non-JSON text, using fallback query")
        return fallback

    if not isinstance(parsed, list):
        logger.info("Query expansion returned %s, using fallback query", type(parsed).__name__)
        return fallback

    queries = [q.strip() for q in parsed if isinstance(q, str) and q.strip()]
    return queries or fallback


def merge_items(results: Iterable[ToolResult], per_result: int = ITEMS_PER_QUERY) -> list[dict[str, Any]]:
    """Deduplicate items across results by id, first occurrence wins.

    Failures contribute nothing; at most `per_result` items are taken from
    each success. Items without an id cannot be deduplicated and are skipped.
    """
    merged: list[dict[str, Any]] = []
    seen: set[str] = set()
    for result in results:
        for item in result.items[:per_result]:
            item_id = item.get("id") if isinstance(item, dict) else None
            if not item_id:
                logger.debug("Skipping briefing item without id")
                continue
            if item_id in seen:
                continue
            seen.add(item_id)
            merged.append(item)
    return merged


def briefing_item_summary(item: dict[str, Any]) -> dict[str, Any]:
    """The fields of an item the narrative prompt needs."""
    attributes = item.get("attributes") or {}
    return {
        "id": item.get("id"),
        "title": attributes.get("title"),
        "agency": attributes.get("agencyId"),
        "type": attributes.get("documentType"),
        "date": attributes.get("postedDate"),
        "openForComment": attributes.get("openForComment"),
        "commentEndDate": attributes.get("commentEndDate"),
    }


class BriefingService:
    """Turns a free-text self-description into a narrated research briefing."""

    def __init__(self, gateway: ChatGatewayPort, executor: ToolExecutorPort):
        self._gateway = gateway
        self._executor = executor

    async def build_briefing(self, description: str) -> BriefingResult:
        """Run the full 3-stage pipeline for one description.

        Raises:
            InvalidRequestError: if description is empty.
            ModelServiceError: if either text-generation call fails.
        """
        if not description or not description.strip():
            raise InvalidRequestError("description is required")

        logger.info("Building briefing for: %s", description[:80])

        # Stage 1: Query expansion
        queries = await self._expand_queries(description)
        logger.info("Briefing queries: %s", queries)

        # Stage 2: Parallel fetch
        results = await self._fetch_all(queries)

        # Stage 3: Deduplicate & synthesize
        items = merge_items(results)
        logger.info(
            "Briefing merged %d item(s) from %d result(s)", len(items), len(results),
        )
        narrative = await self._synthesize(description, items)

        return BriefingResult(narrative=narrative, items=items, queries=queries)

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    async def _expand_queries(self, description: str) -> list[str]:
        """Stage 1: ask for exactly three search phrases."""
        with model_errors("briefing query expansion"):
            text = await self._gateway.complete(
                _EXPANSION_PROMPT.format(description=description)
            )
        return parse_queries(text, description)[:MAX_QUERIES]

    async def _fetch_all(self, queries: list[str]) -> list[ToolResult]:
        """Stage 2: concurrent, mutually independent searches.

        A fetch that fails, or raises despite the executor contract,
        becomes a failure result and contributes zero items.
        """
        invocations = [
            ToolInvocation(
                name=OperationName.SEARCH_DOCUMENTS.value,
                arguments={"searchTerm": query},
            )
            for query in queries
        ]
        raw = await asyncio.gather(
            *(self._executor.execute(inv) for inv in invocations),
            return_exceptions=True,
        )
        results: list[ToolResult] = []
        for query, outcome in zip(queries, raw):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error("Briefing search '%s' raised", query, exc_info=outcome)
                outcome = ToolResult.failure(str(outcome) or type(outcome).__name__)
            elif not outcome.ok:
                logger.info("Briefing search '%s' failed: %s", query, outcome.error)
            results.append(outcome)
        return results

    async def _synthesize(self, description: str, items: list[dict[str, Any]]) -> str:
        """Stage 3: narrate the four-section briefing."""
        prompt = _BRIEFING_PROMPT.format(
            description=description,
            items=json.dumps([briefing_item_summary(i) for i in items], indent=2),
        )
        with model_errors("briefing synthesis"):
            return await self._gateway.complete(prompt)
