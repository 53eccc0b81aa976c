"""
Phone OTP Auth Backend - FastAPI Application

Entry point for the passwordless phone sign-in API. The OTP flow itself
lives in auth/services; this module wires routers, logging and the
startup sign-in probe.
"""
import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from config import get_settings, validate_required_settings
from api.routes import health
from auth.api import auth_routes

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("main")

# Validate configuration on startup
validate_required_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Phone OTP Auth Backend",
    description="Passwordless phone sign-in over Cognito custom auth",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(auth_routes.router)


async def _delayed_auth_probe(delay: float):
    await asyncio.sleep(delay)
    try:
        controller = auth_routes.get_otp_flow_controller()
        await run_in_threadpool(controller.verify_auth)
    except Exception:
        # Runs as a detached task; nothing else would see the failure
        logger.exception("Startup auth probe failed")
        return
    logger.info(f"Startup auth probe: {controller.message}")


@app.on_event("startup")
async def startup_event():
    """Schedule the 'am I signed in' probe."""
    logger.info("Starting Phone OTP Auth Backend...")

    if settings.auth_probe_on_startup:
        app.state.auth_probe_task = asyncio.create_task(
            _delayed_auth_probe(settings.auth_probe_delay_seconds)
        )

    logger.info("Application started successfully")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
