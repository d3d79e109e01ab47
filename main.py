import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import routers
from cashdesk.api.routes import auth, cashiers, transactions
from cashdesk.core import config
from cashdesk.core.errors import CashdeskError, StorageError
from cashdesk.core.logging import configure_logging, log_json
from cashdesk.db.seed import init_db
from cashdesk.utils.error_codes import HTTP_STATUS_TO_ERROR_CODE
from cashdesk.utils.helpers import error_response

configure_logging()
logger = logging.getLogger("cashdesk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    log_json(logger, {"event": "startup", "env": config.APP_ENV})
    yield


app = FastAPI(
    title="Cashdesk API",
    description="FastAPI backend for cashier and transaction management",
    version="1.0.0",
    lifespan=lifespan
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api"


@app.get(f"{API_PREFIX}/health")
def health():
    return {"status": "OK", "message": "Server is running"}

# Include routers
app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
app.include_router(cashiers.router, prefix=f"{API_PREFIX}/cashiers", tags=["Cashiers"])
app.include_router(transactions.router, prefix=f"{API_PREFIX}/transactions", tags=["Transactions"])


@app.exception_handler(CashdeskError)
async def cashdesk_exception_handler(request: Request, exc: CashdeskError):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.code, exc.message, exc.details),
    )

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error_code = HTTP_STATUS_TO_ERROR_CODE.get(exc.status_code, "SERVER_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(error_code, exc.detail),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=error_response(
            HTTP_STATUS_TO_ERROR_CODE.get(422, "VALIDATION_ERROR"),
            "Invalid request: Please send the correct query parameters and fields.",
            jsonable_encoder(exc.errors()),
        ),
    )

@app.exception_handler(SQLAlchemyError)
async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    error = StorageError()
    return JSONResponse(
        status_code=error.status_code,
        content=error_response(error.code, error.message),
    )
