import asyncio
import time
from contextlib import asynccontextmanager

import azure.functions as func
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from brewery_api.db import dispose_engine, get_engine, initialize_database
from brewery_api.exceptions import DatabaseError, ValidationFailedError
from brewery_api.logging_config import logger, tracer
from brewery_api.routes.beer_route import router as beer_router
from brewery_api.routes.common import error_response, validation_failed_message
from brewery_api.routes.customer_route import router as customer_router
from brewery_api.validators.common import request_field_errors

_database_ready = False
_database_lock = asyncio.Lock()


async def ensure_database_ready() -> None:
    """Run the schema bootstrap once per process, whichever host starts first."""
    global _database_ready
    async with _database_lock:
        if not _database_ready:
            await initialize_database(get_engine())
            _database_ready = True


@asynccontextmanager
async def lifespan(_: FastAPI):
    await ensure_database_ready()
    yield
    await dispose_engine()


app = FastAPI(
    title="Brewery API",
    version="2.0.0",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return response


@app.exception_handler(ValidationFailedError)
async def handle_validation_failed(request: Request, exc: ValidationFailedError):
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        validation_failed_message(exc.messages),
        exc.messages,
    )


@app.exception_handler(RequestValidationError)
async def handle_malformed_request(request: Request, exc: RequestValidationError):
    return await handle_validation_failed(
        request, ValidationFailedError(request_field_errors(exc.errors()))
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(DatabaseError)
async def handle_database_error(request: Request, exc: DatabaseError):
    logger.error(
        "Unhandled database error",
        extra={"path": request.url.path},
        exc_info=exc.original_exception,
    )
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "A database error occurred.",
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"Unexpected error processing request: {type(exc).__name__}",
        extra={"path": request.url.path},
        exc_info=exc,
    )
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
    )


app.include_router(beer_router)
app.include_router(customer_router)

function_app = func.FunctionApp()


@function_app.route(route="{*route}", auth_level=func.AuthLevel.FUNCTION)
async def main(req: func.HttpRequest) -> func.HttpResponse:
    """Azure Functions entry-point routed through FastAPI."""
    with tracer.start_as_current_span("process_request") as span:
        span.set_attribute("http.method", req.method)
        span.set_attribute("http.url", str(req.url))
        span.set_attribute("http.route", req.route_params.get('route', ''))

        logger.info(
            f"Processing {req.method} request",
            extra={
                "method": req.method,
                "path": str(req.url),
                "route": req.route_params.get('route', '')
            }
        )

        try:
            await ensure_database_ready()
            response = await func.AsgiMiddleware(app).handle_async(req)
            span.set_attribute("http.status_code", response.status_code)
            return response
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)

            logger.error(
                f"Error processing request: {type(e).__name__}",
                extra={"error_type": type(e).__name__},
                exc_info=True,
            )
            return func.HttpResponse(
                body="Internal Server Error",
                status_code=500
            )
