"""
FastAPI Application - REST API for rules tooling.

Endpoints:
    GET    /health                       Health check
    POST   /api/v1/restrictions/parse    Parse script parameters
    POST   /api/v1/legality/check        Check one action against a table snapshot

Every request carries everything it needs; the service keeps no state
between calls. All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging
import os

# Environment configuration
CANPLAY_ENV = os.getenv("CANPLAY_ENV", "development")
CANPLAY_LOG_LEVEL = os.getenv("CANPLAY_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional LegalityService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..engine_core.expression import ExpressionError
    from ..restriction_schema import RestrictionValidationError
    from .service import LegalityService, UnknownCardError, UnknownPlayerError
    from .schemas import (
        # Request models
        ParseRequest,
        CheckRequest,
        # Response models
        ParseResponse,
        CheckResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    logging.getLogger("canplay").setLevel(CANPLAY_LOG_LEVEL.upper())

    app = FastAPI(
        title="Canplay Legality API",
        description="""
Card Game Action Legality Engine - may this spell or ability be used right now?

## Checking an action

Send a full table snapshot, the card, the action and its restriction
parameters to `POST /api/v1/legality/check`. The response carries the
verdict and the result of every stage (zone, timing, activator,
aggregate gates, activation limits).

## Error Codes

| Code | Description |
|------|-------------|
| `VALIDATION_ERROR` | Restriction parameters or the snapshot are malformed |
| `EXPRESSION_ERROR` | An amount or filter expression could not be evaluated |
| `UNKNOWN_CARD` | The card to check is not in the snapshot |
| `UNKNOWN_PLAYER` | A referenced player is not at the table |
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or LegalityService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    # =========================================================================
    # Restriction Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/restrictions/parse",
        response_model=ParseResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Restrictions"],
        summary="Parse script parameters into a restriction set",
    )
    async def parse_restrictions(request: ParseRequest) -> Union[ParseResponse, JSONResponse]:
        """
        Parse card-script restriction parameters.

        Unknown keys are ignored. Warnings list restrictions that parse
        but can never (or always) pass.
        """
        try:
            return api_service.parse_restrictions(request)
        except RestrictionValidationError as e:
            return make_error_response(
                ErrorCode.VALIDATION_ERROR,
                str(e),
                details={"errors": e.errors},
            )

    # =========================================================================
    # Legality Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/legality/check",
        response_model=CheckResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Malformed parameters"},
            404: {"model": ErrorResponse, "description": "Unknown card or player"},
            422: {"model": ErrorResponse, "description": "Expression could not be evaluated"},
        },
        tags=["Legality"],
        summary="Check whether an action may be used right now",
    )
    async def check_legality(request: CheckRequest) -> Union[CheckResponse, JSONResponse]:
        """
        Check one spell or ability against a table snapshot.

        A rejected action is a normal `200` response with `legal=false`
        and the first failing stage.
        """
        try:
            return api_service.check(request)
        except RestrictionValidationError as e:
            return make_error_response(
                ErrorCode.VALIDATION_ERROR,
                str(e),
                details={"errors": e.errors},
            )
        except UnknownCardError as e:
            return make_error_response(ErrorCode.UNKNOWN_CARD, str(e), status_code=404)
        except UnknownPlayerError as e:
            return make_error_response(ErrorCode.UNKNOWN_PLAYER, str(e), status_code=404)
        except ExpressionError as e:
            logger.warning("Expression error while checking %s: %s", request.card_id, e)
            return make_error_response(
                ErrorCode.EXPRESSION_ERROR,
                str(e),
                status_code=422,
                details={"expression": e.expression},
            )
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="canplay-engine",
            version=API_VERSION,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Canplay Legality API",
            "version": API_VERSION,
            "environment": CANPLAY_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn canplay.api.app:app
app = create_app()
