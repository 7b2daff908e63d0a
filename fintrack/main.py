import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fintrack.database.connection import Base, engine
from fintrack.models import model  # noqa: F401  registers tables on Base.metadata
from fintrack.repositories.settings import settings
from fintrack.routers import (
    category_router,
    insights_router,
    settings_router,
    transaction_router,
    user_router,
)
from fintrack.version import __version__

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="fintrack", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(user_router.user_Router)
app.include_router(category_router.category_Router)
app.include_router(transaction_router.transaction_Router)
app.include_router(settings_router.settings_Router)
app.include_router(insights_router.insights_router)

if __name__ == "__main__":
    uvicorn.run("fintrack.main:app", host="0.0.0.0", port=8000, reload=True)
