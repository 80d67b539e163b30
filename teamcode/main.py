# teamcode/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teamcode.core.config import settings
from teamcode.core.database import init_db
from teamcode.core.errors import ClientError, NotFoundError, StoreError
from teamcode.core.notifier import ChangeNotifier
from teamcode.routers import code, ws_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="teamcode")

# Add CORS middleware (adjust CORS_ORIGINS for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One broadcast channel per process, handed to the engine through dependencies
app.state.notifier = ChangeNotifier()

# Include routers
app.include_router(code.router, prefix="/code", tags=["Code"])
app.include_router(ws_router.router, tags=["Events"])


@app.exception_handler(ClientError)
async def client_error_handler(request: Request, exc: ClientError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# Initialize the database (create tables if needed)
init_db()

@app.get("/")
def read_root():
    return {"message": "teamcode version-control service"}
