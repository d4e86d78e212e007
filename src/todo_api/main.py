import argparse
import logging
from contextlib import asynccontextmanager
from typing import Optional, Sequence

import psycopg2
import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from src.todo_api import health, identity, tasks
from src.todo_api.config import Settings, configure_logging, load_settings
from src.todo_api.db import Database
from src.todo_api.errors import register_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: check the database is reachable (logged, not fatal).
    Shutdown: drain the connection pool after in-flight requests finish.
    """
    db = app.state.db
    logger.info("Starting %s", app.title)
    try:
        await run_in_threadpool(db.ping)
        logger.info("Connected to PostgreSQL database")
    except psycopg2.Error:
        logger.exception("Error acquiring database connection")

    yield

    logger.info("Shutting down gracefully...")
    await run_in_threadpool(db.close)


def _build_app(
    title: str,
    description: str,
    routers: Sequence[APIRouter],
    settings: Optional[Settings],
    database: Optional[Database],
    with_success_flag: bool,
) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title=title, description=description, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database or Database.from_settings(settings)

    # CORS: allow all by default. Restrict via CORS_ALLOW_ORIGINS (comma separated).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app, with_success_flag=with_success_flag)
    for router in routers:
        app.include_router(router)
    return app


# PUBLIC_INTERFACE
def create_identity_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Identity service: signup, login, health."""
    return _build_app(
        title="Todo Identity API",
        description="Per-user signup and login with bcrypt-hashed credentials.",
        routers=[identity.router, health.router],
        settings=settings,
        database=database,
        with_success_flag=True,
    )


# PUBLIC_INTERFACE
def create_tasks_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Task service: admin login plus CRUD over the shared task list.

    Task routes require `Authorization: Bearer <token>` only when TASKS_REQUIRE_AUTH is set.
    """
    return _build_app(
        title="Todo Tasks API",
        description="Shared task list with a single configured admin login.",
        routers=[tasks.auth_router, tasks.router, health.router],
        settings=settings,
        database=database,
        with_success_flag=False,
    )


identity_app = create_identity_app()
tasks_app = create_tasks_app()

_APPS = {
    "identity": "src.todo_api.main:identity_app",
    "tasks": "src.todo_api.main:tasks_app",
}


# PUBLIC_INTERFACE
def run(argv: Optional[Sequence[str]] = None) -> None:
    """Command line entry point: serve one of the two services with uvicorn."""
    parser = argparse.ArgumentParser(prog="todo-api", description="Run a todo backend service.")
    parser.add_argument("service", choices=sorted(_APPS), help="Which service to serve")
    parser.add_argument("--host", default=None, help="Bind host (default: HOST env or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT env or 5000)")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Server running on port %s", port)
    # uvicorn handles SIGINT/SIGTERM: it stops accepting, lets requests finish,
    # runs the lifespan shutdown (pool drain) and exits 0.
    uvicorn.run(_APPS[args.service], host=host, port=port, log_level=settings.log_level.lower())
