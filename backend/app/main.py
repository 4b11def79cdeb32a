# School bulletin backend entrypoint.

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api import academic_data
from backend.app.api import auth
from backend.app.api import bulletins
from backend.app.api import login
from backend.app.api import modules
from backend.app.api import parent_portal
from backend.app.api import register
from backend.app.api import reports
from backend.app.api import students
from backend.app.core.app_logger import get_logger
from backend.app.core.dev_seed import ensure_default_head
from backend.app.core.exceptions import SchoolError
from backend.app.core.settings import get_settings
from backend.app.db.session import SessionLocal

settings = get_settings()
app = FastAPI(title=settings.app_name, version=settings.api_version)
logger = get_logger("api")

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(register.router)
app.include_router(login.router)
app.include_router(students.router)
app.include_router(modules.router)
app.include_router(academic_data.router)
app.include_router(reports.router)
app.include_router(bulletins.router)
app.include_router(parent_portal.router)


@app.exception_handler(SchoolError)
async def school_error_handler(request: Request, exc: SchoolError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred"})


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def seed_default_head():
    db = SessionLocal()
    try:
        ensure_default_head(db)
    finally:
        db.close()
