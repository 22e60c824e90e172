"""FastAPI app exposing match, refresh and health endpoints."""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bridge_aid import __version__
from bridge_aid.logging import get_logger
from bridge_aid.service import CriteriaValidationError, ResourceMatchingService
from bridge_aid.sources import CatalogUnavailableError

logger = get_logger(__name__, component="api")


def create_app(
    service: ResourceMatchingService,
    cors_origins: Optional[List[str]] = None,
) -> FastAPI:
    """Build the HTTP app around one matching service.

    The catalog is loaded at startup so the first request does not pay for it.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        snapshot = service.catalog.snapshot()
        logger.info(
            f"Bridge Aid API starting with {len(snapshot)} resources",
            extra={
                "event": "api.startup",
                "resources_count": len(snapshot),
                "served_by": snapshot.served_by,
            },
        )
        yield
        service.close()
        logger.info("Bridge Aid API shut down", extra={"event": "api.shutdown"})

    app = FastAPI(
        title="Bridge Aid",
        version=__version__,
        description="Matches people with local social-service resources",
        lifespan=lifespan,
    )
    app.state.service = service

    origins = cors_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CriteriaValidationError)
    async def criteria_error_handler(request, exc: CriteriaValidationError):
        logger.info(
            f"Rejected criteria: {exc.message}",
            extra={"event": "api.match.rejected", "errors": exc.errors},
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_json())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request, exc: RequestValidationError):
        # malformed JSON or a non-object body
        errors = [str(error.get("msg", error)) for error in exc.errors()]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Request body must be a JSON object", "details": errors},
        )

    @app.get("/health")
    def health() -> JSONResponse:
        report = service.health()
        code = status.HTTP_200_OK if report["status"] == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(status_code=code, content=report)

    @app.post("/refresh-resources")
    def refresh_resources() -> JSONResponse:
        try:
            return JSONResponse(content=service.refresh())
        except CatalogUnavailableError as e:
            logger.error(
                f"Error refreshing resources: {e}",
                extra={"event": "api.refresh.failed"},
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"status": "error", "error": str(e)},
            )

    @app.post("/match")
    def match(payload: Optional[Dict[str, Any]] = Body(None)) -> JSONResponse:
        try:
            response = service.match(payload)
        except CriteriaValidationError:
            raise
        except Exception:
            logger.error(
                "Error matching resources",
                exc_info=True,
                extra={"event": "api.match.failed"},
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error"},
            )
        return JSONResponse(content=response.to_json())

    return app
