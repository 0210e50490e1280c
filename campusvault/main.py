import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from campusvault.core.config import settings
from campusvault.core.database import engine, Base, SessionLocal
from campusvault.core.exceptions import AppError
from campusvault.core.logger import setup_logging
from campusvault.crud.subject import normalize_branches
from campusvault.routers import admin, auth, downloads, resources, subjects, users
from campusvault.schemas.common import ResponseModel
from campusvault.tasks.jobs import start_scheduler, stop_scheduler
from campusvault.utils.storage import ensure_dir


setup_logging()
logger = logging.getLogger("campusvault.main")

# Create database tables
Base.metadata.create_all(bind=engine)
ensure_dir(settings.UPLOAD_DIR)


def run_startup_branch_migration():
    db = SessionLocal()
    try:
        result = normalize_branches(db)
        logger.info(f"Branch migration on startup: {result['changes']} subjects updated, {result['removed']} duplicates merged")
    except Exception:
        logger.exception("Branch migration on startup failed")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.NORMALIZE_BRANCHES_ON_STARTUP:
        run_startup_branch_migration()
    start_scheduler()
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    stop_scheduler()


app = FastAPI(
    title=settings.APP_NAME,
    description="College resource sharing API",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify your frontend domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logger middleware
@app.middleware("http")
async def log_request(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000

    if request.url.path.startswith(settings.API_PREFIX) and request.method != "OPTIONS":
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 1),
            },
        )

    return response


# --- Error handlers ---

def error_response(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ResponseModel(code=status_code, msg=msg).model_dump()
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc.status_code, exc.msg)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    msg = f"{field}: {first.get('msg')}" if field else (first.get("msg") or "Invalid request data")
    return error_response(400, msg)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "Internal Server Error")


# Include routers
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(subjects.router, prefix=settings.API_PREFIX)
app.include_router(resources.router, prefix=settings.API_PREFIX)
app.include_router(downloads.router, prefix=settings.API_PREFIX)
app.include_router(users.router, prefix=settings.API_PREFIX)
app.include_router(admin.router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    return {"message": f"Welcome to {settings.APP_NAME} API", "docs": "/docs"}


@app.get(f"{settings.API_PREFIX}/healthcheck")
def health_check():
    return {"status": "ok", "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())}
