import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import LOG_LEVEL, RATE_LIMIT_PER_MINUTE, SEED_DEMO_USERS
from .db import SessionLocal, init_models
from .errors import NomadCabsError
from .middleware import install_middleware
from .rabbitmq import publisher
from .redis_client import redis_client
from .routes import admin, auth, bookings, fares, fleet, payments, transactions
from .seed import seed_demo_users

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger("nomad_cabs")

OPENAPI_TAGS = [
    {"name": "System", "description": "Operational endpoints."},
    {"name": "Auth", "description": "Registration, login and profile."},
    {"name": "Fares", "description": "Fare quotes."},
    {"name": "Bookings", "description": "Ride bookings and their status transitions."},
    {"name": "Drivers", "description": "Driver profiles and document resubmission."},
    {"name": "Vehicles", "description": "Vehicle registration and document resubmission."},
    {"name": "Transactions", "description": "Driver earnings."},
    {"name": "Payments", "description": "Settlement of completed bookings."},
    {"name": "Admin", "description": "User management, verification, bookings and transaction logs."},
]

app = FastAPI(title="Nomad Cabs API", openapi_tags=OPENAPI_TAGS)

install_middleware(app, redis_client=redis_client, max_per_minute=RATE_LIMIT_PER_MINUTE)

app.include_router(auth.router)
app.include_router(fares.router)
app.include_router(bookings.router)
app.include_router(fleet.router)
app.include_router(transactions.router)
app.include_router(payments.router)
app.include_router(admin.router)


# ================= ERRORS =================

@app.exception_handler(NomadCabsError)
async def domain_error_handler(request: Request, exc: NomadCabsError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error"})


# ================= SYSTEM =================

@app.get("/health", tags=["System"])
async def health():
    return {
        "status": "ok",
        "service": "nomad-cabs",
        "events_enabled": publisher.enabled,
        "rate_limit_enabled": redis_client is not None,
    }


@app.on_event("startup")
async def startup():
    await init_models()

    if SEED_DEMO_USERS:
        async with SessionLocal() as db:
            await seed_demo_users(db)

    # never crash the service if RabbitMQ is temporarily unavailable
    try:
        await publisher.connect()
    except Exception as e:
        logger.warning("RabbitMQ connect failed at startup; continuing without events: %s", e)


@app.on_event("shutdown")
async def shutdown():
    await publisher.close()
