"""
API Module - Rules tooling interface.

Exposes the legality engine via REST API. Clients:
1. Parse card-script parameters into restriction sets
2. Send a table snapshot and an action to check
3. Receive the verdict with per-stage detail

Every call is self-contained. Nothing is stored between requests.
"""

from .schemas import (
    # Requests
    ParseRequest,
    CheckRequest,
    # Responses
    ParseResponse,
    CheckResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    TableSnapshot,
    PlayerInfo,
    CardInfo,
    PlayOptionInfo,
    ActionInfo,
    ErrorCode,
)
from .service import LegalityService, UnknownCardError, UnknownPlayerError
from .app import create_app

__all__ = [
    # Requests
    "ParseRequest",
    "CheckRequest",
    # Responses
    "ParseResponse",
    "CheckResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "TableSnapshot",
    "PlayerInfo",
    "CardInfo",
    "PlayOptionInfo",
    "ActionInfo",
    "ErrorCode",
    # Service
    "LegalityService",
    "UnknownCardError",
    "UnknownPlayerError",
    "create_app",
]
