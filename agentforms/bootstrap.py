"""Assemble a FormSessionService from configuration.

Example usage:

    from agentforms.bootstrap import build_service
    from agentforms.config import get_settings

    service = build_service(get_settings())
    session = await service.start_session(agent.id)
"""

import redis.asyncio as redis

from agentforms.admission import (
    AbuseDetector,
    AdmissionController,
    CounterStore,
    InMemoryCounterStore,
    RateLimiter,
    RedisCounterStore,
)
from agentforms.config.settings import Settings
from agentforms.conversation.store import SessionStore
from agentforms.conversation.stores import InMemorySessionStore, RedisSessionStore
from agentforms.observability.logging import get_logger
from agentforms.orchestration import (
    InMemorySessionMutex,
    RedisSessionMutex,
    SessionMutex,
    TurnOrchestrator,
)
from agentforms.providers.llm import TextGenerationProvider, create_text_provider
from agentforms.schema.store import AgentStore
from agentforms.schema.stores import InMemoryAgentStore, RedisAgentStore
from agentforms.service import FormSessionService

logger = get_logger(__name__)


def build_service(
    settings: Settings,
    redis_client: redis.Redis | None = None,
    provider: TextGenerationProvider | None = None,
) -> FormSessionService:
    """Create a FormSessionService with stores for the configured backend.

    Args:
        settings: Application settings
        redis_client: Client to use when storage.backend is "redis"; one is
            created from storage.redis_url when omitted
        provider: Override the configured text generation provider

    Returns:
        Fully wired FormSessionService
    """
    storage = settings.storage
    turn = settings.turn

    agent_store: AgentStore
    session_store: SessionStore
    counter_store: CounterStore
    mutex: SessionMutex

    if storage.backend == "redis":
        client = redis_client or redis.from_url(storage.redis_url)
        agent_store = RedisAgentStore(client, key_prefix=storage.key_prefix)
        session_store = RedisSessionStore(
            client,
            key_prefix=storage.key_prefix,
            ttl_seconds=storage.session_ttl_seconds,
        )
        counter_store = RedisCounterStore(client)
        mutex = RedisSessionMutex(
            client,
            key_prefix=storage.key_prefix,
            lock_timeout=turn.mutex_lock_timeout,
            blocking_timeout=turn.mutex_blocking_timeout,
        )
    else:
        agent_store = InMemoryAgentStore()
        session_store = InMemorySessionStore()
        counter_store = InMemoryCounterStore()
        mutex = InMemorySessionMutex(blocking_timeout=turn.mutex_blocking_timeout)

    admission = AdmissionController(
        RateLimiter(counter_store, key_prefix=settings.admission.key_prefix),
        AbuseDetector(settings.admission.abuse),
        settings.admission,
    )
    orchestrator = TurnOrchestrator(
        session_store,
        provider or create_text_provider(settings.generation),
        config=turn,
    )

    logger.info("service_built", backend=storage.backend)

    return FormSessionService(
        agent_store=agent_store,
        session_store=session_store,
        orchestrator=orchestrator,
        admission=admission,
        mutex=mutex,
        abuse_window_seconds=settings.admission.abuse.window_seconds,
    )
