import logging
import sqlite3
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recovery_desk.config import settings
from recovery_desk.database import check_integrity, init_db
from recovery_desk.routers import analytics, backup, customers, documents, jobs, reports

logger = logging.getLogger("recovery_desk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    try:
        verdict = check_integrity()
    except sqlite3.Error as exc:
        logger.error("Record store at %s could not be checked: %s", settings.db_path, exc)
    else:
        if verdict == "ok":
            logger.info("Record store ready at %s", settings.db_path)
        else:
            logger.error("Record store at %s is damaged (%s); restore from a JSON export", settings.db_path, verdict)
    yield


app = FastAPI(
    title="Recovery Desk",
    description="Job intake, delivery and records for a data recovery shop",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(jobs.router, prefix=settings.api_prefix)
app.include_router(reports.router, prefix=settings.api_prefix)
app.include_router(customers.router, prefix=settings.api_prefix)
app.include_router(documents.router, prefix=settings.api_prefix)
app.include_router(backup.router, prefix=settings.api_prefix)
app.include_router(analytics.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
