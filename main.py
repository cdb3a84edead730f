# main.py
import sys
import os
import asyncio
import errno
import logging
import socket
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import config
from database import Database
from errors import register_error_handlers
from routes import info, students

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Student Management System")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(info.router)
app.include_router(students.router)


@app.on_event("startup")
async def startup_event():
    logger.info("Starting Student Management System...")
    database = Database.from_uri(config.MONGODB_URI, config.MONGODB_DB, timeout_ms=config.MONGODB_TIMEOUT_MS)
    app.state.database = database
    # Requests are served whether or not this ever succeeds
    app.state.connect_task = asyncio.create_task(database.connect())


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "connect_task", None)
    if task is not None and not task.done():
        task.cancel()
    database = getattr(app.state, "database", None)
    if database is not None:
        database.close()


def choose_port(host: str, preferred: int, fallback: int) -> int:
    """Return `preferred` if it can be bound on `host`, otherwise `fallback`."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        try:
            probe.bind((host, preferred))
        except OSError as e:
            if e.errno != errno.EADDRINUSE:
                raise
            logger.warning(f"Port {preferred} is busy, trying {fallback}...")
            return fallback
    return preferred


def log_endpoints(host: str, port: int) -> None:
    base = f"http://{host}:{port}"
    logger.info(f"STUDENT MANAGEMENT SYSTEM STARTED on port {port}")
    logger.info(f"Server running on {base}")
    logger.info("Student endpoints:")
    for method in ("GET   ", "POST  "):
        logger.info(f"   {method} {base}/students")
    for method in ("GET   ", "PUT   ", "DELETE"):
        logger.info(f"   {method} {base}/students/{{id}}")


if __name__ == "__main__":
    import uvicorn
    port = choose_port(config.HOST, config.PORT, config.FALLBACK_PORT)
    log_endpoints(config.HOST, port)
    uvicorn.run("main:app", host=config.HOST, port=port)
