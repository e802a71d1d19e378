"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from kuda import __version__
from kuda.api.endpoints.auth import auth_api
from kuda.api.endpoints.banking import banking_api
from kuda.api.endpoints.payments import payments_api
from kuda.database.session_cache import SessionCache
from kuda.database.token_store import TokenStore
from kuda.flows.state_manager import StateManager
from kuda.integrations.factory import build_clients
from kuda.utils.config_loader import load_app_config, use_real_integrations

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Kuda Banking API",
    description="Backend-for-frontend for the Kuda banking screens",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

config = load_app_config()

# Callers pass their own bearer token, so the shared clients never hold one.
backend, payments = build_clients(config, token_store=TokenStore())
session_cache = SessionCache()
state_manager = StateManager(session_cache, backend, payments, config)

app.state.config = config
app.state.state_manager = state_manager

app.include_router(auth_api, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(banking_api, prefix="/api/v1")
app.include_router(payments_api, prefix="/api/v1/payments", tags=["Payments"])


@app.get("/", tags=["Health"])
async def root():
    return {"service": "Kuda Banking API", "status": "healthy", "version": __version__, "timestamp": datetime.now().isoformat()}


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check (integration mode, session cache)."""
    return {
        "status": "healthy",
        "integrations": "real" if use_real_integrations(config) else "mock",
        "session_cache": session_cache.ping(),
        "timestamp": datetime.now().isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("kuda.api.main:app", host="0.0.0.0", port=8000, reload=False)
