# api/main.py
# Run locally with:  uvicorn api.main:app --reload
import os
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from api.config_validator import validate_startup_config
from api.errors import report_exception
from api.logger import new_request_id, set_request_id
from api.routes.folders import router as folders_router
from api.routes.health import router as health_router

# Validate configuration on startup
validate_startup_config(exit_on_failure=True)

# Get frontend origin from environment variable
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")

ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    FRONTEND_ORIGIN,
]

app = FastAPI(
    title="Folder Share API",
    description="Folder management for a file-storage app: owned folders, nesting and folders/files shared with a user",
    version="1.0.0",
    docs_url="/api/swagger",
    redoc_url=None,
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
    max_age=600,
)

# Anything that is not an HTTPException ends up here as a 500
app.add_exception_handler(Exception, report_exception)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or new_request_id()
    set_request_id(request_id)
    try:
        response = await call_next(request)
    except Exception as exc:
        # Render the 500 here so it still carries the request id
        response = await report_exception(request, exc)
    response.headers["X-Request-ID"] = request_id
    return response


# All routes live under /api, e.g. /folders -> /api/folders
app.include_router(health_router, prefix="/api")
app.include_router(folders_router, prefix="/api")
