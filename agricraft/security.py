# agricraft/security.py
from typing import List, Set
from fastapi import HTTPException, Security, FastAPI
from fastapi.security.api_key import APIKeyHeader
from fastapi.middleware.cors import CORSMiddleware

from .config import settings

API_KEY_NAME = "X-API-Key"

def _parse_csv(raw: str) -> List[str]:
    return [x.strip() for x in (raw or "").split(",") if x.strip()]

def load_api_keys() -> Set[str]:
    return set(_parse_csv(settings.API_KEYS))

_api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)

def verify_api_key(api_key: str = Security(_api_key_header)) -> str:
    """
    Dependency enforcing API-key auth.
    Accepts any key in API_KEYS (comma-separated); with no keys configured, every caller passes.
    """
    keys = load_api_keys()
    if not keys:
        return ""
    if api_key and api_key in keys:
        return api_key
    raise HTTPException(status_code=403, detail="Invalid or missing API key")

def add_cors(app: FastAPI) -> None:
    """
    Attach CORS from CORS_ALLOWED_ORIGINS.
    - "*" -> any origin, credentials disabled
    - "https://a.example,https://b.example" -> allow list, credentials enabled
    """
    origins_env = settings.CORS_ALLOWED_ORIGINS
    wildcard = origins_env == "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else _parse_csv(origins_env),
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[API_KEY_NAME],
    )
