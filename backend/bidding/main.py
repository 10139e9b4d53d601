# backend/bidding/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from .database import engine
from . import models
from .api import auth_router, projects_router, bids_router, deliverables_router
from .config import settings
from .errors import BiddingError
from .utils.logging import api_logger

# Create all tables on startup
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="Bidding System API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/storage", StaticFiles(directory=str(settings.DELIVERABLES_PATH)), name="storage")

# Include routers
app.include_router(auth_router)
app.include_router(bids_router)
app.include_router(deliverables_router)
app.include_router(projects_router)


@app.exception_handler(BiddingError)
async def bidding_error_handler(request: Request, exc: BiddingError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    api_logger.warning("Malformed request", extra={
        "path": request.url.path,
        "error_count": len(errors)
    })
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/")
async def root():
    return {"message": "Bidding System API is running"}
