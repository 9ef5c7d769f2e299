"""
MedChain Records API -- Application entry point.

Run with:
    uvicorn medchain.main:app --reload

Then open http://localhost:8000/docs for the interactive Swagger UI.

This file:
  1. Configures logging
  2. Creates the FastAPI application
  3. Adds CORS middleware (permissive for demo)
  4. Mounts all route modules
  5. Maps MedChainError subclasses to JSON error responses
  6. Defines the health check endpoint
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from medchain import store
from medchain.errors import MedChainError
from medchain.ledger import ipfs, solana
from medchain.routes import (
    appointments,
    dashboard,
    ipfs as ipfs_routes,
    notifications,
    patients,
    reports,
    transactions,
    wallets,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Create the FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="MedChain Records API",
    version=VERSION,
    description=(
        "Medical records as NFTs. Doctors issue reports that are pinned to IPFS "
        "and minted to the patient's Solana wallet; patients book appointments "
        "and browse their records.\n\n"
        "---\n\n"
        "## Core Endpoints\n\n"
        "| Endpoint | Purpose |\n"
        "|----------|--------|\n"
        "| `GET /v1/wallets/{address}/role` | Which dashboard a wallet gets |\n"
        "| `POST /v1/reports` | Issue a medical report NFT |\n"
        "| `GET /v1/patients/{wallet}/reports` | A patient's reports |\n"
        "| `POST /v1/appointments` | Book an appointment |\n"
        "| `GET /v1/notifications` | Recent events for polling |\n\n"
        "---\n\n"
        "**Status:** Demo mode. Minting, transfers and (without Pinata keys) "
        "IPFS uploads are simulated."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],         # demo only
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Mount route modules -- one file per resource
# ---------------------------------------------------------------------------

app.include_router(wallets.router)
app.include_router(ipfs_routes.router)
app.include_router(reports.router)
app.include_router(appointments.router)
app.include_router(patients.router)
app.include_router(transactions.router)
app.include_router(notifications.router)
app.include_router(dashboard.router)


@app.exception_handler(MedChainError)
async def medchain_error_handler(request: Request, exc: MedChainError) -> JSONResponse:
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def startup():
    """Pick up reports mirrored to the snapshot file by a previous run."""
    added = store.merge_snapshot()
    if added:
        logger.info("Loaded %d report(s) from snapshot", added)


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/docs")


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get(
    "/v1/health",
    summary="Health check",
    description="Returns the current status of the API. Use this for uptime monitoring.",
    tags=["System"],
)
async def health():
    return {
        "status": "healthy",
        "mode": "pinata" if ipfs.pinata_configured() else "demo",
        "version": VERSION,
        "network": solana.SOLANA_NETWORK,
        "reports_stored": len(store.nft_reports),
        "appointments_stored": len(store.appointments),
        "patients_registered": len(store.patients),
    }
