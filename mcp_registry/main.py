import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from mcp_registry.api.payloads import health_payload, info_payload
from mcp_registry.api.responses import RegistryJSONResponse, error_payload
from mcp_registry.api.servers import router as servers_router
from mcp_registry.core.dependencies import get_registry_config, get_repository
from mcp_registry.domain.models import API_PREFIX, RegistryConfig

# Configure logging; the configured level is applied by apply_log_level()
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def apply_log_level(config: RegistryConfig) -> None:
    logging.getLogger().setLevel(config.log_level)


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Authorization, Content-Type",
}


app = FastAPI(
    title="MCP Registry Demo",
    version="0.1.0",
    description="Read-only FastAPI implementation of the MCP registry v0.1 API over a static dataset.",
    default_response_class=RegistryJSONResponse,
)


@app.on_event("startup")
async def startup_event() -> None:
    """
    Load the dataset before serving; a missing or corrupt file aborts startup.
    """
    apply_log_level(get_registry_config())
    repo = get_repository()
    logger.info("Serving %d server entries", len(repo.servers))


@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    """
    Permissive CORS: every OPTIONS request is answered here as a preflight,
    and every other response is marked as readable from any origin.
    """
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers["Access-Control-Allow-Origin"] = CORS_HEADERS["Access-Control-Allow-Origin"]
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> RegistryJSONResponse:
    if isinstance(exc.detail, dict):
        content = exc.detail
    elif exc.status_code in (404, 405):
        # A wrong method on a known path is reported like an unknown endpoint.
        return RegistryJSONResponse(
            status_code=404,
            content=error_payload("Not found", f"The endpoint {request.url.path} does not exist"),
        )
    else:
        content = error_payload(str(exc.detail))
    return RegistryJSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> RegistryJSONResponse:
    logger.exception("Unhandled error while serving %s", request.url.path)
    return RegistryJSONResponse(
        status_code=500,
        content=error_payload("Internal server error", str(exc)),
        headers={"Access-Control-Allow-Origin": CORS_HEADERS["Access-Control-Allow-Origin"]},
    )


@app.get("/")
async def index(config: RegistryConfig = Depends(get_registry_config)) -> dict:
    """
    API information: name, version and the endpoint templates.
    """
    return info_payload(config)


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return health_payload()


app.include_router(servers_router, prefix=API_PREFIX, tags=["servers"])


def run() -> None:
    import uvicorn

    config = get_registry_config()
    apply_log_level(config)
    logger.info("MCP Registry API server running on port %d", config.port)
    logger.info("API available at http://localhost:%d%s/servers", config.port, API_PREFIX)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    """
    Allow running `python -m mcp_registry.main` to start the Uvicorn server.
    """
    run()
