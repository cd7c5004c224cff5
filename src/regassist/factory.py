"""
factory - Composition root for the regulations assistant.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured services and the agent.

Usage:
    from regassist.factory import ServiceFactory
    from regassist.infrastructure.config import Settings

    config = Settings.from_env()
    config.validate()
    factory = ServiceFactory(config)

    # Conversational agent:
    result = await factory.create_orchestrator().answer("EPA rules on PFAS")

    # Direct service access:
    briefing = await factory.create_briefing_service().build_briefing(description)
"""

from __future__ import annotations

import logging
from typing import Optional

from langchain_core.language_models import BaseChatModel

from regassist.agent.executor import ToolExecutor
from regassist.agent.orchestrator import AgentOrchestrator
from regassist.agent.prompt import build_system_prompt
from regassist.agent.tools.registry import ToolRegistry, default_tool_registry
from regassist.application.services.analysis import AnalysisService
from regassist.application.services.briefing import BriefingService
from regassist.application.services.pagination import PaginationService
from regassist.infrastructure.config import Settings
from regassist.infrastructure.llm.chat_gateway import LangChainChatGateway
from regassist.infrastructure.llm.llm_builder import build_llm
from regassist.infrastructure.regulations.client import RegulationsClient

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root: wires all dependencies together.

    The HTTP session, the chat model and the executor are built once and
    shared read-only by every service and request. Services themselves are
    cheap and created per call.
    """

    def __init__(
        self,
        config: Settings,
        llm: Optional[BaseChatModel] = None,
        client: Optional[RegulationsClient] = None,
    ):
        self._config = config
        self._client = client or RegulationsClient(
            api_key=config.regulations_api_key,
            base_url=config.regulations_base_url,
            timeout=config.regulations_timeout,
        )
        self._registry = default_tool_registry(page_size=config.regulations_page_size)
        self._executor = ToolExecutor(self._registry, self._client)
        self._gateway = LangChainChatGateway(
            llm or self._build_llm(), timeout=config.model_timeout,
        )
        self._system_prompt = build_system_prompt(self._registry)
        self._tools = self._registry.to_langchain_tools()
        logger.info(
            "ServiceFactory ready (provider=%s, model=%s, tools=%s)",
            config.llm_provider, config.active_llm_model, self._registry.names(),
        )

    @property
    def config(self) -> Settings:
        return self._config

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Service creation
    # ------------------------------------------------------------------

    def create_orchestrator(self) -> AgentOrchestrator:
        """Create the agent loop bound to the six Regulations.gov operations."""
        return AgentOrchestrator(
            gateway=self._gateway,
            executor=self._executor,
            tools=self._tools,
            system_prompt=self._system_prompt,
            max_rounds=self._config.agent_max_rounds,
        )

    def create_pagination_service(self) -> PaginationService:
        """Create a PaginationService for "load more"."""
        return PaginationService(self._executor)

    def create_briefing_service(self) -> BriefingService:
        """Create a BriefingService (query expansion → fetch → synthesis)."""
        return BriefingService(gateway=self._gateway, executor=self._executor)

    def create_analysis_service(self) -> AnalysisService:
        """Create an AnalysisService for summaries, Q&A, comments and synthesis."""
        return AnalysisService(
            gateway=self._gateway,
            executor=self._executor,
            client=self._client,
        )

    def close(self) -> None:
        """Release the shared HTTP session."""
        self._client.close()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_llm(self) -> BaseChatModel:
        """Build the chat model shared by the agent and the services."""
        return build_llm(
            provider=self._config.llm_provider,
            model=self._config.active_llm_model,
            api_key=self._config.active_llm_api_key,
            ollama_base_url=self._config.ollama_base_url,
            timeout=self._config.model_timeout,
        )
