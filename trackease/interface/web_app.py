"""Mini README: FastAPI application serving the TrackEase API and dashboard.

Structure:
    * TransactionPayload / CredentialsPayload - permissive request bodies.
    * create_application - application factory wiring routes, templates and
      the configured store.

Bodies are parsed permissively and validated by the finance helpers so that
an unsupported type, a missing date or a bad amount is reported as a 400
before the store is touched. With ``auth_enabled`` every transaction route
requires a bearer token and scopes reads and deletes to its user; without
it the routes operate on the whole store. Route handlers are plain functions
so FastAPI runs their blocking store and bcrypt calls in its threadpool.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ConfigDict

from .. import __version__
from ..auth import (
    AuthenticationError,
    bearer_token,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from ..configuration import TrackEaseSettings, get_settings
from ..export import export_transactions_csv
from ..finance import advisory_categories, build_report, build_transaction, sort_history
from ..logging_utils import get_logger
from ..storage import (
    DuplicateUserError,
    StorageError,
    TransactionNotFoundError,
    TransactionStore,
    create_store,
)

LOGGER = get_logger(__name__)


class TransactionPayload(BaseModel):
    """Create request; validated by ``build_transaction``."""

    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    category: Optional[str] = None
    amount: Any = None
    note: Optional[str] = None
    date: Optional[str] = None


class CredentialsPayload(BaseModel):
    """Register and login request."""

    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    password: Optional[str] = None


def create_application(
    settings: Optional[TrackEaseSettings] = None,
    store: Optional[TransactionStore] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    owns_store = store is None
    store = store or create_store(settings)
    if settings.auth_enabled and settings.jwt_secret == "change-me":
        LOGGER.warning("Authentication is enabled with the default JWT secret; set TRACKEASE_JWT_SECRET")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        LOGGER.info(
            "TrackEase ready (backend=%s, auth=%s)", store.backend_name, settings.auth_enabled
        )
        yield
        if owns_store:
            store.close()

    app = FastAPI(title="TrackEase", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    static_directory = Path(__file__).parent / "static"
    app.mount("/static", StaticFiles(directory=str(static_directory)), name="static")

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report malformed bodies as 400 rather than FastAPI's default 422."""

        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "Invalid request")
        LOGGER.info("Rejected request to %s: %s %s", request.url.path, location, message)
        return JSONResponse(status_code=400, content={"detail": f"{location}: {message}".strip(": ")})

    def current_owner(authorization: Optional[str] = Header(None)) -> Optional[str]:
        """Resolve the acting user from the bearer token when auth is enabled."""

        if not settings.auth_enabled:
            return None
        if not authorization:
            raise HTTPException(status_code=401, detail="No token provided")
        try:
            payload = decode_access_token(bearer_token(authorization), settings)
        except AuthenticationError as error:
            LOGGER.info("Rejected token: %s", error)
            raise HTTPException(status_code=403, detail="Invalid token") from error
        return payload.user_id

    @app.get("/", response_class=HTMLResponse)
    def dashboard(request: Request) -> HTMLResponse:
        """Render the dashboard shell; data is loaded by the page script."""

        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "categories": advisory_categories(),
                "auth_enabled": settings.auth_enabled,
                "currency_symbol": settings.currency_symbol,
                "version": __version__,
            },
        )

    @app.get("/api/categories")
    def categories() -> JSONResponse:
        """Return the advisory category lists used by the entry form."""

        return JSONResponse(advisory_categories())

    @app.get("/api/transactions")
    def list_transactions(owner: Optional[str] = Depends(current_owner)) -> JSONResponse:
        """Return the caller's transactions, newest first."""

        try:
            transactions = store.list_transactions(owner)
        except StorageError as error:
            LOGGER.exception("Failed to fetch transactions")
            raise HTTPException(status_code=500, detail="Failed to fetch transactions") from error
        return JSONResponse([transaction.as_dict() for transaction in sort_history(transactions)])

    @app.post("/api/transactions", status_code=201)
    def add_transaction(
        payload: TransactionPayload, owner: Optional[str] = Depends(current_owner)
    ) -> JSONResponse:
        """Validate and store a new transaction."""

        try:
            transaction = build_transaction(payload.model_dump(), owner=owner)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        try:
            stored = store.create_transaction(transaction)
        except StorageError as error:
            LOGGER.exception("Failed to add transaction")
            raise HTTPException(status_code=500, detail="Failed to add transaction") from error
        return JSONResponse(status_code=201, content=stored.as_dict())

    @app.delete("/api/transactions/{transaction_id}", status_code=204)
    def delete_transaction(
        transaction_id: str, owner: Optional[str] = Depends(current_owner)
    ) -> Response:
        """Delete one transaction owned by the caller."""

        try:
            store.delete_transaction(transaction_id, owner)
        except TransactionNotFoundError as error:
            raise HTTPException(status_code=404, detail="Not found") from error
        except StorageError as error:
            LOGGER.exception("Failed to delete transaction %s", transaction_id)
            raise HTTPException(status_code=500, detail="Failed to delete transaction") from error
        return Response(status_code=204)

    @app.get("/api/export")
    def export_csv(owner: Optional[str] = Depends(current_owner)) -> Response:
        """Download the caller's history as CSV."""

        try:
            transactions = store.list_transactions(owner)
        except StorageError as error:
            LOGGER.exception("Failed to export transactions")
            raise HTTPException(status_code=500, detail="Failed to export transactions") from error
        LOGGER.debug("Exporting %s transactions", len(transactions))
        return Response(
            content=export_transactions_csv(transactions),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=transactions.csv"},
        )

    @app.get("/api/summary")
    def summary(owner: Optional[str] = Depends(current_owner)) -> JSONResponse:
        """Return totals, monthly rollup, category breakdown and history."""

        try:
            transactions = store.list_transactions(owner)
        except StorageError as error:
            LOGGER.exception("Failed to build summary")
            raise HTTPException(status_code=500, detail="Failed to build summary") from error
        report = build_report(transactions)
        return JSONResponse(report.as_dict(settings.currency_symbol))

    if settings.auth_enabled:

        @app.post("/api/register")
        def register(payload: CredentialsPayload) -> JSONResponse:
            """Create an account and return its public fields."""

            email = (payload.email or "").strip()
            if not email or not payload.password:
                raise HTTPException(status_code=400, detail="Email and password required")
            try:
                user = store.create_user(email, hash_password(payload.password))
            except DuplicateUserError as error:
                raise HTTPException(status_code=400, detail="Email already registered") from error
            except StorageError as error:
                LOGGER.exception("Registration failed")
                raise HTTPException(status_code=500, detail="Registration failed") from error
            return JSONResponse(user.public_dict())

        @app.post("/api/login")
        def login(payload: CredentialsPayload) -> JSONResponse:
            """Verify credentials and issue an access token."""

            email = (payload.email or "").strip()
            if not email or not payload.password:
                raise HTTPException(status_code=400, detail="Email and password required")
            try:
                user = store.get_user_by_email(email)
            except StorageError as error:
                LOGGER.exception("Login failed")
                raise HTTPException(status_code=500, detail="Login failed") from error
            if user is None:
                raise HTTPException(status_code=400, detail="User not found")
            if not verify_password(payload.password, user.password_hash):
                raise HTTPException(status_code=400, detail="Invalid password")
            LOGGER.info("Issued token for user %s", user.user_id)
            return JSONResponse({"token": create_access_token(user, settings)})

    return app
