"""
Enrollment Document Verification - Backend API
FastAPI service hosting the document verification console: administrators
review a student's enrollment documents, approve them or send them back for
revision, and correct the enrollment record while looking at the scan.

Install dependencies:
pip install fastapi uvicorn pydantic pydantic-settings httpx cachetools pypdfium2 Pillow

Run server:
uvicorn main:app --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Optional
from cachetools import TTLCache
import uuid
import logging
import os
import time
import contextvars

from settings import get_settings
from adapters.json import JsonStudentStore
from adapters.http import HttpArtifactFetcher
from core.console import VerificationConsole
from core.viewer import DocumentViewer

# ========== Request Context for Tracing ==========
request_id_var = contextvars.ContextVar('request_id', default=None)
request_start_time_var = contextvars.ContextVar('request_start_time', default=None)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================================================
# COLLABORATORS (student source, persistence, artifact fetching)
# ============================================================================

logger.info(f"🔧 Student source: {settings.student_source_path}")

student_store = JsonStudentStore(settings.student_source_path)

artifact_fetcher = HttpArtifactFetcher(
    artifact_root=settings.artifact_root,
    timeout=settings.artifact_fetch_timeout,
    cache_ttl=settings.artifact_cache_ttl,
    cache_size=settings.artifact_cache_size,
)

# ---- DI helpers (used by routers/*) ----
def get_student_store() -> JsonStudentStore:
    return student_store

# ============================================================================
# CONSOLE SESSIONS
# ============================================================================

# One console per open verification screen; idle screens expire.
console_sessions = TTLCache(maxsize=settings.max_sessions, ttl=settings.session_ttl_seconds)

def get_console_sessions() -> TTLCache:
    return console_sessions

def new_console(target_student_id: Optional[str] = None) -> tuple[str, VerificationConsole]:
    """Create and register a console bound to the live student list."""
    viewer = DocumentViewer(
        artifact_fetcher,
        zoom_step=settings.zoom_step,
        zoom_min=settings.zoom_min,
        zoom_max=settings.zoom_max,
        render_scale=settings.page_render_scale,
    )
    console = VerificationConsole(
        student_store.students,
        viewer,
        notifier=student_store.notify,
        approval_note=settings.approval_note,
        target_student_id=target_student_id,
    )
    session_id = str(uuid.uuid4())
    console_sessions[session_id] = console
    logger.info(f"Opened console session {session_id[:8]} (target={target_student_id})")
    return session_id, console

# ============================================================================
# FASTAPI APP
# ============================================================================

app = FastAPI(
    title="Enrollment Document Verification API",
    description="Document verification console for student enrollment records",
    version="1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# ========== Request Tracing Middleware ==========
@app.middleware("http")
async def request_tracing_middleware(request, call_next):
    """Add request_id and timing to all requests."""
    # Generate request ID
    request_id = str(uuid.uuid4())[:8]
    request_id_var.set(request_id)
    request_start_time_var.set(time.time())

    # Process request
    response = await call_next(request)

    # Calculate latency
    latency = time.time() - request_start_time_var.get()

    # Log request
    logger.info(
        "Request completed",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "latency_ms": round(latency * 1000, 2),
        }
    )

    # Add request_id to response headers
    response.headers["X-Request-ID"] = request_id

    return response

ALLOWED_ORIGINS = settings.get_origins_list()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )

# ============================================================================
# ENDPOINTS
# ============================================================================
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "students": len(student_store.students),
        "sessions": len(console_sessions),
        "uptime_seconds": round(time.time() - startup_time, 1),
        "version": "1.0"
    }


@app.get("/healthz")
async def healthz():
    """
    Kubernetes-style liveness probe.
    Returns 200 if the application is running.
    """
    return {
        "status": "ok",
        "timestamp": time.time(),
        "version": "1.0"
    }


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": "Enrollment Document Verification API",
        "version": "1.0",
        "status": "running",
        "docs": "/docs"
    }


from routers import students as students_router
app.include_router(students_router.router)

from routers import verification as verification_router
app.include_router(verification_router.router)

startup_time = time.time()

@app.on_event("startup")
async def startup_event():
    global startup_time
    startup_time = time.time()
    logger.info("Verification API starting up...")
    logger.info(f"Students loaded: {len(student_store.students)}")
    logger.info(f"Allowed origins: {ALLOWED_ORIGINS}")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Verification API shutting down...")

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
