"""
FastAPI application factory.

Creates and configures the workflow state machine API application.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_fsm import __version__
from workflow_fsm.api.routes import router
from workflow_fsm.config import Settings, configure_logging, get_settings
from workflow_fsm.core.definition import WorkflowDefinition, load_definition
from workflow_fsm.core.plugins import load_plugin
from workflow_fsm.core.state_machine import WorkflowManager
from workflow_fsm.i18n import create_translator
from workflow_fsm.security import AuthManager

logger = logging.getLogger(__name__)

# Used when no definition file is configured
DEFAULT_DEFINITION: dict = {
    "states": [
        {"name": "initial"},
        {"name": "in_progress"},
        {"name": "completed"},
    ],
    "transitions": [
        {"from": "initial", "to": "in_progress"},
        {"from": "in_progress", "to": "completed"},
    ],
    "events": [],
}


def resolve_definition(settings: Settings) -> WorkflowDefinition:
    if settings.definition_path:
        logger.info(f"Loading workflow definition from {settings.definition_path}")
        return load_definition(settings.definition_path)
    return WorkflowDefinition.from_dict(DEFAULT_DEFINITION)


def create_lifespan(settings: Settings, manager: Optional[WorkflowManager] = None):
    """
    Build the application lifespan.

    A pre-built ``manager`` is used as is (and not bootstrapped), which is
    how tests inject a workflow.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # Startup
        logger.info("Starting Workflow State Machine...")

        definition = resolve_definition(settings)
        workflow = manager
        if workflow is None:
            workflow = await WorkflowManager.from_settings(definition, settings)

            for plugin_path in settings.plugins:
                workflow.register_plugin(load_plugin(plugin_path))
            workflow.initialize_plugins()

            restored = await workflow.bootstrap()
            if restored:
                logger.info(f"Restored persisted state {restored}")

        app.state.manager = workflow
        app.state.translator = create_translator(settings.default_locale, definition.translations)
        app.state.auth = AuthManager.from_mapping(settings.users)

        current = workflow.get_current_state()
        logger.info(
            f"Workflow State Machine started - Environment: {settings.environment.value}, "
            f"state: {current.name if current else None}"
        )

        yield

        # Shutdown
        logger.info("Shutting down Workflow State Machine...")
        await workflow.shutdown()
        logger.info("Workflow State Machine shutdown complete")

    return lifespan


def create_app(
    settings: Optional[Settings] = None,
    manager: Optional[WorkflowManager] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    settings = settings or get_settings()

    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Finite state machine engine for application workflows",
        version=__version__,
        lifespan=create_lifespan(settings, manager),
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(router)

    # Root endpoint
    @app.get("/", tags=["root"])
    async def root():
        return {
            "name": settings.app_name,
            "version": __version__,
            "status": "running",
        }

    return app


# Application instance for uvicorn
app = create_app()
