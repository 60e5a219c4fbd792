"""Form Mailer API.

FastAPI application relaying contact forms to a mailbox:
- GET /token: Issue the session CSRF token for a form
- POST /contact: Validate a submission and send it by email
- GET /health: Service health check

Responses for POST /contact follow the request's response mode:
- Ajax (X-Requested-With: XMLHttpRequest or MAILER_AJAX_MODE=true):
  200 with an empty body, or 400 with {"status": 400, "detail": "..."}
- Exception: the MailerError is raised and answered as 400 plain text

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated
from urllib.parse import urlsplit

from fastapi import Depends, FastAPI, Form, HTTPException, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.middleware.sessions import SessionMiddleware

from form_mailer.api.schemas import ErrorResponse, HealthResponse, TokenResponse
from form_mailer.config import MailerSettings
from form_mailer.core.exceptions import ConfigError, MailerError, ValidationError
from form_mailer.core.logger import get_logger, setup_logging
from form_mailer.mailer import Mailer
from form_mailer.models.message import RequestContext, ResponseMode, SendResult, SendState
from form_mailer.session.store import RequestSessionStore, SessionStore, get_token

logger = get_logger(__name__)


# =============================================================================
# Dependencies
# =============================================================================
def get_settings(request: Request) -> MailerSettings:
    """Dependency: Get application configuration."""
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return settings


def get_session_store(request: Request) -> SessionStore:
    """Dependency: Wrap the signed-cookie session of the current request."""
    return RequestSessionStore(request.session)


def get_response_mode(
    request: Request,
    settings: Annotated[MailerSettings, Depends(get_settings)],
) -> ResponseMode:
    """Dependency: Ajax mode for XMLHttpRequest submissions or when configured."""
    requested_with = request.headers.get("X-Requested-With", "")
    if settings.MAILER_AJAX_MODE or requested_with.lower() == "xmlhttprequest":
        return ResponseMode.AJAX
    return ResponseMode.EXCEPTION


def get_request_context(request: Request) -> RequestContext:
    """Dependency: Host and URI of the page the form was submitted from."""
    host = request.headers.get("host") or None
    referer = request.headers.get("referer")
    if referer:
        parts = urlsplit(referer)
        uri = parts.path or "/"
        if parts.query:
            uri = f"{uri}?{parts.query}"
    else:
        uri = request.url.path
    return RequestContext(host=host, uri=uri)


# =============================================================================
# Response Translation
# =============================================================================
def render_result(result: SendResult, mode: ResponseMode) -> Response:
    """Translate a SendResult into an HTTP response.

    Raises:
        MailerError: In exception mode, when the send failed.
    """
    if mode is ResponseMode.AJAX:
        if result.ok:
            return Response(status_code=status.HTTP_200_OK)
        return JSONResponse(status_code=result.status_code, content=result.to_payload())

    result.unwrap()
    return PlainTextResponse("Message sent", status_code=status.HTTP_200_OK)


async def mailer_error_handler(request: Request, exc: MailerError) -> Response:
    """Answer an exception-mode MailerError with its message."""
    logger.info(f"Submission rejected on {request.url.path}: {exc.message}")
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def build_mailer(settings: MailerSettings, store: SessionStore, mode: ResponseMode) -> Mailer:
    """Create a Mailer from settings.

    Raises:
        ConfigError: If credentials or the receiving address are unusable.
    """
    settings.validate_smtp_config()
    mailer = Mailer(
        settings.get_mailer_config(),
        session=store,
        response_mode=mode,
        **settings.get_smtp_options(),
    )
    mailer.draft.subject = settings.MAIL_SUBJECT
    return mailer


# =============================================================================
# Lifespan Context Manager
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings: MailerSettings = app.state.settings

    setup_logging(
        log_dir=settings.LOG_DIR,
        log_level=settings.LOG_LEVEL,
        enable_file=settings.LOG_TO_FILE,
        max_size_mb=settings.LOG_MAX_SIZE_MB,
        backup_count=settings.LOG_BACKUP_COUNT,
        settings=settings,
    )

    try:
        settings.validate_smtp_config()
    except ConfigError as e:
        logger.warning(f"Form delivery disabled until configured: {e}")

    yield  # Application runs here

    logger.info(f"{settings.SERVICE_NAME} stopped")


# =============================================================================
# API Endpoints
# =============================================================================
def token_endpoint(
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> TokenResponse:
    """Return the session CSRF token, creating it on first use."""
    return TokenResponse(token=get_token(store))


def contact_endpoint(
    settings: Annotated[MailerSettings, Depends(get_settings)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    mode: Annotated[ResponseMode, Depends(get_response_mode)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    email: Annotated[str, Form()] = "",
    name: Annotated[str, Form()] = "",
    message: Annotated[str, Form()] = "",
    subject: Annotated[str | None, Form()] = None,
    reply_to: Annotated[str | None, Form()] = None,
    token: Annotated[str | None, Form()] = None,
) -> Response:
    """Relay a contact form submission to the configured mailbox.

    Missing fields are left empty so the Mailer reports them in its fixed
    order rather than FastAPI answering 422.
    """
    try:
        mailer = build_mailer(settings, store, mode)
    except ConfigError as e:
        # Log full error details server-side
        logger.error(f"Mailer misconfigured: {e}")
        # Return sanitized error to client (intentionally not chaining)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Mailer is not configured",
        ) from None

    try:
        mailer.compose(
            from_email=email,
            from_name=name,
            body=mailer.prepare_message(message, context) if message else message,
            subject=subject or None,
            reply_to=reply_to or None,
        )
        if token is not None:
            mailer.set_token(token)
    except ValidationError as e:
        result = SendResult(state=SendState.FAILED, error=e)
    else:
        result = mailer.send()

    return render_result(result, mode)


def health_endpoint(
    settings: Annotated[MailerSettings, Depends(get_settings)],
) -> HealthResponse:
    """Check service health.

    No session or token required - used by load balancers and monitoring.
    """
    try:
        settings.validate_smtp_config()
        smtp_status = "ok"
    except ConfigError:
        smtp_status = "not_configured"

    return HealthResponse(
        status="ok",
        smtp=smtp_status,
        version=settings.SERVICE_VERSION,
    )


# =============================================================================
# FastAPI Application
# =============================================================================
def create_app(settings: MailerSettings | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Configuration to serve with (loaded from the environment if None).
    """
    settings = settings or MailerSettings()

    application = FastAPI(
        title=settings.SERVICE_NAME,
        description="Contact form to email relay",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )
    application.state.settings = settings

    application.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE_NAME,
        same_site="lax",
    )
    application.add_exception_handler(MailerError, mailer_error_handler)

    application.add_api_route("/token", token_endpoint, methods=["GET"], response_model=TokenResponse)
    application.add_api_route(
        "/contact",
        contact_endpoint,
        methods=["POST"],
        responses={
            200: {"description": "Message sent"},
            400: {"model": ErrorResponse, "description": "Submission rejected"},
            500: {"description": "Mailer not configured"},
        },
    )
    application.add_api_route("/health", health_endpoint, methods=["GET"], response_model=HealthResponse)

    return application


# =============================================================================
# Entry Point
# =============================================================================
def run():
    """Run the API server."""
    import uvicorn

    settings = MailerSettings()
    logger.info(f"Starting {settings.SERVICE_NAME} on {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run(
        "form_mailer.api.main:create_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=False,
    )


if __name__ == "__main__":
    run()
