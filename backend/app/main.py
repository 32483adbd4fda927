"""
Pharmacy Supply Chain API.

ARCHITECTURE:
- FastAPI routers per entity (auth, accounts, medicines, commands, stocks, demands)
- Repositories encode ownership checks and workflow legality
- SQLAlchemy over SQLite by default; source of truth for all state
- Server-side sessions: opaque token -> identity snapshot, swept hourly

ROLES:
- pharmacy: owns stock, places commands
- fournisseur: accepts and delivers commands
- user: files demand requests
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.response import ok
from app.api.routes import auth, commands, demands, medicines, stocks
from app.api.routes.accounts import fournisseur_router, pharmacy_router, users_router
from app.core.clock import utcnow
from app.core.config import settings
from app.db.init_db import init_db
from app.services.session_sweeper import start_session_sweeper, stop_session_sweeper

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    1. Initialize database tables (and the starter catalogue if enabled)
    2. Start the expired-session sweeper

    Shutdown:
    1. Stop the sweeper
    """
    logger.info("[*] Initializing database...")
    init_db()
    logger.info("[OK] Database initialized")

    if settings.SESSION_SWEEP_ENABLED:
        start_session_sweeper()
    else:
        logger.warning("[WARN] Session sweeper disabled")

    yield

    if settings.SESSION_SWEEP_ENABLED:
        await stop_session_sweeper()


app = FastAPI(
    title="Pharmacy Supply Chain API",
    description="Medicines, pharmacy stock, supplier commands and consumer demands.",
    version="1.0.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

# SECURITY: Restrict CORS to specific origins, methods and headers (not wildcards)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,  # Allow the session cookie
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        settings.SESSION_HEADER_NAME,
        "Accept",
        "Origin",
    ],
    max_age=600,  # Cache preflight for 10 minutes
)


# SECURITY: Add security headers middleware
@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"  # Prevent MIME sniffing
    response.headers["X-Frame-Options"] = "DENY"  # Prevent clickjacking
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if settings.SECURE_COOKIES:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"  # HSTS
    return response


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users_router, prefix="/api/users", tags=["users"])
app.include_router(pharmacy_router, prefix="/api/pharmacy", tags=["pharmacy"])
app.include_router(fournisseur_router, prefix="/api/fournisseur", tags=["fournisseur"])
app.include_router(medicines.router, prefix="/api/medicines", tags=["medicines"])
app.include_router(commands.router, prefix="/api/commands", tags=["commands"])
app.include_router(stocks.router, prefix="/api/stocks", tags=["stocks"])
app.include_router(demands.router, prefix="/api/demands", tags=["demands"])


@app.get("/")
def index():
    return ok(
        data={
            "status": "Running",
            "timestamp": utcnow().isoformat(),
            "endpoints": {
                "auth": "/api/auth",
                "users": "/api/users",
                "pharmacy": "/api/pharmacy",
                "medicines": "/api/medicines",
                "commands": "/api/commands",
                "fournisseur": "/api/fournisseur",
                "stocks": "/api/stocks",
                "demands": "/api/demands",
            },
        },
        message="Pharmacy Management System API",
    )


@app.get("/health")
def health():
    return {"status": "ok"}
