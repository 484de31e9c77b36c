# api/gateway.py
import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from database.db_session import dispose_db, init_db
from services.errors import BillingError, InternalError, ValidationError
from services.tokens import TokenService
from settings import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    CORS_ORIGINS,
    DEFAULT_JWT_SECRET,
    HOST,
    JWT_ALGORITHM,
    JWT_SECRET,
    LOG_LEVEL,
    PORT,
)

from api.auth import router as auth_router
from api.bill_routes import router as bill_router

# Setup
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("api.gateway")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the development default")
    app.state.token_service = TokenService(
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
        ttl=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    logger.info("Billing API started")
    yield
    dispose_db()


app = FastAPI(title="Billing App API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(bill_router)


# ------------------------------
# Error handling
# ------------------------------
@app.exception_handler(BillingError)
async def billing_error_handler(request: Request, exc: BillingError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", []) if part != "body"]
        errors.append({"field": ".".join(loc) or None, "message": error.get("msg", "Invalid value")})
    logger.info("Rejected request to %s: %d validation errors", request.url.path, len(errors))
    return JSONResponse(ValidationError(errors).to_dict(), status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(InternalError().to_dict(), status_code=500)


# ------------------------------
# Routes
# ------------------------------
@app.get("/", response_class=PlainTextResponse)
def home():
    return "Billing App API - Running"


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
