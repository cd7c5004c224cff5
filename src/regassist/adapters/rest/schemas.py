"""Pydantic models for REST API request/response validation.

Field names follow the camelCase JSON the web client already speaks.
Required fields are checked by the services so a missing field gets the
same message whichever adapter the request came through.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# --- Chat ---

class ChatBody(BaseModel):
    message: str = ""
    history: list[dict[str, Any]] = Field(default_factory=list)


class ChatOut(BaseModel):
    response: str
    results: Optional[dict[str, Any]] = None
    pagination: Optional[dict[str, Any]] = None
    history: list[dict[str, Any]]


class LoadMoreBody(BaseModel):
    toolName: Optional[str] = None
    toolInput: Optional[dict[str, Any]] = None


class LoadMoreOut(BaseModel):
    results: dict[str, Any]
    pagination: Optional[dict[str, Any]] = None


# --- Briefing ---

class BriefingBody(BaseModel):
    description: str = ""


class BriefingOut(BaseModel):
    briefing: str
    items: list[dict[str, Any]]


# --- Analysis ---

class SummarizeBody(BaseModel):
    item: Optional[dict[str, Any]] = None
    resultType: Optional[str] = None


class DocumentQABody(BaseModel):
    question: str = ""
    item: Optional[dict[str, Any]] = None
    qaHistory: list[dict[str, Any]] = Field(default_factory=list)


class DocumentQAOut(BaseModel):
    answer: str
    qaHistory: list[dict[str, Any]]


class DraftCommentBody(BaseModel):
    document: Optional[dict[str, Any]] = None
    position: str = ""
    perspective: str = ""


class SynthesizeBody(BaseModel):
    items: list[dict[str, Any]] = Field(default_factory=list)
    resultType: Optional[str] = None
    originalQuery: Optional[str] = None


# --- Status ---

class StatusOut(BaseModel):
    regulationsApiKey: bool
    llmApiKey: bool
    llmProvider: str
