"""
PDDL Planner - FastAPI Backend
Main application entry point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import Optional

from pddl_planner.api import planners, planning
from pddl_planner.core.config import settings
from pddl_planner.core.logging import configure_logging
from pddl_planner.orchestrator import PlanningOrchestrator
from pddl_planner.planners.registry import PlannerRegistry

logger = logging.getLogger(__name__)


def create_app(registry: Optional[PlannerRegistry] = None) -> FastAPI:
    """Build the API.  Without a registry the auto-discovered planners are served."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management"""
        # Startup
        logger.info("Starting PDDL Planner API...")

        Path(settings.STAGING_PATH).mkdir(parents=True, exist_ok=True)
        app.state.orchestrator = PlanningOrchestrator(registry)

        logger.info(
            "Planners registered: %s",
            ", ".join(app.state.orchestrator.registry.list_names()),
        )

        yield

        # Shutdown
        logger.info("Shutting down PDDL Planner API...")

    app = FastAPI(
        title="PDDL Planner API",
        description="""
    Runs PDDL planning problems on the planners installed on this host.

    * **Planners**: registered planners and their availability
    * **Plan**: run one or several planners (parallel or sequential) on a problem
    """,
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(planners.router, prefix="/api/planners", tags=["Planners"])
    app.include_router(planning.router, prefix="/api/plan", tags=["Planning"])

    @app.get("/")
    async def root():
        """Root endpoint - API info"""
        return {
            "name": "PDDL Planner API",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy"}

    return app


app = create_app()


def serve() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run(
        "pddl_planner.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    serve()
