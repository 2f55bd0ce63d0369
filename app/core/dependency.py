from functools import lru_cache
import logging

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.schemas import RequestContext
from app.auth.service import get_request_context
from app.chat.providers.base import ChatProvider
from app.core.config import CHAT_PROVIDER, DATA_SOURCE
from app.core.database import get_db
from app.core.datasource import DataSource, FixtureDataSource, LiveDataSource

logger = logging.getLogger(__name__)
DEFAULT_CHAT_PROVIDER = "together"


def fixtures_configured() -> bool:
    return DATA_SOURCE == "fixtures"


def get_data_source(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> DataSource:
    """
    Data source for the caller's own rows: sample data when the service runs
    on fixtures or nobody is signed in, the database otherwise.
    """
    if fixtures_configured() or not ctx.is_authenticated:
        return FixtureDataSource()
    return LiveDataSource(db)


def get_public_data_source(db: Session = Depends(get_db)) -> DataSource:
    """Data source for rows everyone may read, such as the therapist directory."""
    if fixtures_configured():
        return FixtureDataSource()
    return LiveDataSource(db)


def require_writable() -> None:
    if fixtures_configured():
        raise HTTPException(status_code=503, detail="Service is running on sample data; changes are disabled")


@lru_cache(maxsize=None)
def _together() -> ChatProvider:
    from app.chat.providers.together import TogetherChatProvider
    return TogetherChatProvider()


@lru_cache(maxsize=None)
def _openai() -> ChatProvider:
    from app.chat.providers.openai import OpenAIChatProvider
    return OpenAIChatProvider()


def pick_chat_provider(name: str) -> ChatProvider:
    name = (name or DEFAULT_CHAT_PROVIDER).strip().lower()
    if name == "openai":
        return _openai()
    if name != DEFAULT_CHAT_PROVIDER:
        logger.warning(f"Unknown chat provider '{name}'. Falling back to default '{DEFAULT_CHAT_PROVIDER}'.")
    return _together()


def get_chat_provider() -> ChatProvider:
    """
    FastAPI dependency returning the configured chat completion provider,
    built once per process.
    """
    return pick_chat_provider(CHAT_PROVIDER)
