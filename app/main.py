# /app/main.py

import logging
import os

# --- Core FastAPI Imports ---
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

# --- Application-specific Router Imports ---
from .routers import (
    dashboard_router,
    students_router,
    classes_router,
    assignments_router,
    gradebook_router,
    attendance_router,
)

# --- Service Imports for Startup Logic ---
from .db.database import init_db
from .services import database_service
from .services.errors import InvalidInputError, NotFoundError

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # This code runs ONCE when the application starts up.
    if database_service.USE_SQL_STORE:
        init_db()
        logger.info("Using the SQL record store.")
    else:
        logger.info("Using the in-memory record store (seeded: %s).", database_service.SEED_MOCK_DATA)
    yield


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="ClassTrack Backend API",
    description="Students, classes, grades and attendance, with the statistics behind the ClassTrack dashboard.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Domain Error Translation ---
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})


# --- API Router Inclusion ---
app.include_router(dashboard_router.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(students_router.router, prefix="/api/students", tags=["Students"])
app.include_router(classes_router.router, prefix="/api/classes", tags=["Classes"])
app.include_router(assignments_router.router, prefix="/api/assignments", tags=["Assignments"])
app.include_router(gradebook_router.router, prefix="/api/gradebook", tags=["Gradebook"])
app.include_router(attendance_router.router, prefix="/api/attendance", tags=["Attendance"])

# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "ClassTrack Backend is running!", "version": app.version}
