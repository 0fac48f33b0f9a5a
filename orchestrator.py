"""Main orchestrator for the conversation intelligence pipeline."""

import logging
from typing import Optional, List, Union, Mapping

from config.settings import Settings
from config.generation import create_generation_config
from schemas.conversation import ConversationMessage
from schemas.intelligence import RoleSignal, RoleResult
from schemas.responses import TurnResult
from schemas.usage import TokenUsage

# LLM components
from llm.factory import create_llm_client, LLMProvider
from llm.base_client import BaseLLMClient
from llm.cost_calculator import TokenCostCalculator

# Memory components
from memory.conversation_cache import ConversationCache
from memory.context_optimizer import ContextOptimizer
from memory.models import SessionContext
from memory.sqlite_store import SQLiteSessionStore
from memory.token_estimator import estimate_tokens

# Intelligence agents
from agents.role_detector import RoleDetector
from agents.intent_detector import IntentDetector
from agents.tool_suggestions import ToolSuggestionEngine

logger = logging.getLogger(__name__)


class ConversationOrchestrator:
    """Wires context optimization and lead intelligence into a chat turn."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        llm_client: Optional[BaseLLMClient] = None,
        store: Optional[SQLiteSessionStore] = None,
        cache: Optional[ConversationCache] = None
    ):
        """
        Initialize orchestrator.

        Args:
            settings: Application settings
            llm_client: Model-completion client (built from settings if omitted)
            store: Session store (built from settings if omitted and memory is enabled)
            cache: Process-wide conversation cache
        """
        self.settings = settings or Settings()

        self.cache = cache or ConversationCache(
            ttl_seconds=self.settings.cache_ttl_seconds,
            sweep_interval_seconds=self.settings.cache_sweep_interval_seconds
        )
        self.optimizer = ContextOptimizer(cache=self.cache)

        self.role_detector = RoleDetector()
        self.intent_detector = IntentDetector()
        self.suggestion_engine = ToolSuggestionEngine()

        self.llm_client = llm_client
        if self.llm_client is None:
            self._init_llm_client()

        self.store = store
        if self.store is None and self.settings.memory_enabled:
            self._init_memory()

    def _init_llm_client(self):
        """Initialize LLM client based on settings."""
        api_key = self.settings.get_llm_api_key()

        if not api_key:
            logger.warning(
                f"No API key for {self.settings.llm_provider}. "
                "Turns will return optimized context without a reply."
            )
            return

        try:
            provider = LLMProvider(self.settings.llm_provider)
            self.llm_client = create_llm_client(
                provider=provider,
                api_key=api_key,
                model=self.settings.llm_model
            )
            logger.info(
                f"LLM client initialized: {self.settings.llm_provider} "
                f"({self.llm_client.get_model_name()})"
            )
        except Exception as e:
            logger.error(f"Failed to initialize LLM client: {e}")
            self.llm_client = None

    def _init_memory(self):
        """Initialize session store."""
        try:
            self.store = SQLiteSessionStore(db_path=self.settings.db_path)
            logger.info(f"Session store initialized: {self.settings.db_path}")
        except Exception as e:
            logger.error(f"Failed to initialize session store: {e}")
            self.store = None

    def init_session(
        self,
        session_id: str,
        email: str,
        name: Optional[str] = None,
        company_url: Optional[str] = None,
        signal: Optional[Union[RoleSignal, Mapping[str, Optional[str]]]] = None
    ) -> SessionContext:
        """
        Start a session and record the visitor's detected role.

        Args:
            session_id: Session ID
            email: Visitor email
            name: Optional visitor name
            company_url: Optional company URL
            signal: Research snapshot from the lead-research collaborator

        Returns:
            SessionContext with role and confidence filled in
        """
        role = self.role_detector.detect_role(signal)
        research = None
        if signal is not None:
            research = signal.model_dump(exclude_none=True) if isinstance(signal, RoleSignal) else dict(signal)

        context = SessionContext(
            session_id=session_id,
            email=email,
            name=name,
            company_url=company_url,
            role=role.role,
            role_confidence=role.confidence,
            research=research or None,
        )

        if self.store:
            try:
                self.store.create_session(session_id, email, name=name, company_url=company_url)
                self.store.update_role(session_id, role.role, role.confidence, research=research)
                context = self.store.get_session(session_id) or context
            except Exception as e:
                logger.error(f"Failed to persist session {session_id}: {e}")

        logger.info(f"Session {session_id} started: role={role.role} ({role.confidence})")
        return context

    def handle_message(
        self,
        session_id: str,
        text: str,
        system_prompt: str,
        history: Optional[List[ConversationMessage]] = None,
        stage: Optional[str] = None,
        feature: str = "chat"
    ) -> TurnResult:
        """
        Process one visitor message end-to-end.

        Args:
            session_id: Session ID
            text: Visitor message
            system_prompt: System prompt for the model
            history: Prior messages (loaded from the store when omitted)
            stage: Optional conversation stage for tool ranking
            feature: Generation preset name

        Returns:
            TurnResult
        """
        if history is None:
            history = self._load_history(session_id)
        messages = list(history) + [ConversationMessage(role="user", content=text)]

        intent = self.intent_detector.detect(text)
        context = self.optimizer.optimize(
            messages,
            system_prompt,
            session_id,
            max_history_tokens=self.settings.max_history_tokens
        )

        if self.settings.verbose:
            logger.info(
                f"Session {session_id}: {len(messages)} messages -> "
                f"{len(context.message_parts)} parts, ~{context.estimated_tokens} tokens "
                f"(cache: {context.used_cache})"
            )

        reply = None
        usage = None
        cost = None
        if self.llm_client:
            response = self.llm_client.chat(
                context.message_parts,
                create_generation_config(feature)
            )
            reply = response.content
            usage = response.usage or TokenUsage(
                input_tokens=context.estimated_tokens,
                output_tokens=estimate_tokens(reply)
            )
            cost = TokenCostCalculator.calculate_cost(
                self.llm_client.get_provider_name(),
                self.llm_client.get_model_name(),
                usage
            )

        role = self._session_role(session_id)
        suggestions = self.suggestion_engine.suggest(intent, role=role, stage=stage)

        result = TurnResult(
            session_id=session_id,
            reply=reply,
            intent=intent,
            role=role,
            context=context,
            suggestions=suggestions,
            usage=usage,
            cost=cost,
        )
        self._persist_turn(result, text, feature)
        return result

    def _load_history(self, session_id: str) -> List[ConversationMessage]:
        if not self.store:
            return []
        try:
            return self.store.get_messages(session_id)
        except Exception as e:
            logger.warning(f"Failed to load history for session {session_id}: {e}")
            return []

    def _session_role(self, session_id: str) -> Optional[RoleResult]:
        if not self.store:
            return None
        try:
            session = self.store.get_session(session_id)
        except Exception as e:
            logger.warning(f"Failed to load session {session_id}: {e}")
            return None
        if not session or not session.role:
            return None
        return RoleResult(role=session.role, confidence=session.role_confidence)

    def _persist_turn(self, result: TurnResult, text: str, feature: str):
        """Write the turn to the session store. Failures are logged only."""
        if not self.store:
            return
        try:
            self.store.add_message(result.session_id, "user", text)
            if result.reply is not None:
                self.store.add_message(result.session_id, "assistant", result.reply)
            if result.usage is not None and result.cost is not None:
                self.store.log_token_usage(
                    result.session_id,
                    self.llm_client.get_provider_name(),
                    self.llm_client.get_model_name(),
                    result.usage,
                    result.cost,
                    metadata={"feature": feature, "used_cache": result.context.used_cache}
                )
        except Exception as e:
            logger.error(f"Failed to persist turn for session {result.session_id}: {e}")
