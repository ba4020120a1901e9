"""
Expense tracker API - application entry point.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from elara.core.config import Settings, settings as default_settings
from elara.core.errors import register_error_handlers
from .database import ExpenseDatabase
from .routes import router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = ExpenseDatabase(settings.EXPENSES_DATABASE_URL)
        await db.create_tables()
        app.state.expense_db = db
        logger.info(f"Expense API running on port {settings.EXPENSES_PORT}")
        yield
        await db.dispose()

    app = FastAPI(title="Elara Expense API", version=settings.APP_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)

    return app


app = create_app()


if __name__ == '__main__':
    import uvicorn
    uvicorn.run("elara.expenses.main:app", host=default_settings.HOST, port=default_settings.EXPENSES_PORT)
