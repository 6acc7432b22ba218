"""Request-scoped dependencies: bearer token and backend stores."""

from typing import AsyncIterator, Callable, Optional

from fastapi import Depends, Header, HTTPException

from config import SUPABASE_ANON_KEY, SUPABASE_SERVICE_ROLE_KEY
from services.candidate_store import CandidateStore

StoreFactory = Callable[[], CandidateStore]


def bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Token from `Authorization: Bearer <token>`; 401 when absent."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Missing authorization header")
    return token.strip()


async def get_store(token: str = Depends(bearer_token)) -> AsyncIterator[CandidateStore]:
    """Store acting as the calling user, so row-level security applies."""
    store = CandidateStore(access_token=token)
    try:
        yield store
    finally:
        await store.aclose()


def _service_store() -> CandidateStore:
    return CandidateStore(api_key=SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY)


def get_service_store_factory() -> StoreFactory:
    """Factory for privileged stores used by the processing pipeline, including background tasks."""
    return _service_store
