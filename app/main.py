import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import DEBUG, APP_HOST, APP_PORT
from database.init import Base, engine
from logging_config import configure_logging
from responses.error import bad_request_error
from routes import (
    auth_routes,
    admin_routes,
    staff_routes,
    catalog_routes,
    agent_routes,
    vendor_routes,
)
from services.otp_service import InMemoryOtpStore
from utils.exceptions import AppError

configure_logging()
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.otp_store = InMemoryOtpStore()
    yield
    app.state.otp_store.clear()


app = FastAPI(title="Property Services Brokerage API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return exc.response()


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Body validation failures share the 400 envelope with domain validation errors
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": str(error.get("msg", "")).removeprefix("Value error, "),
        }
        for error in exc.errors()
    ]
    if not errors:
        return bad_request_error("Invalid request")
    first = errors[0]
    message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
    return bad_request_error(message, {"errors": errors})


app.include_router(auth_routes.router)
app.include_router(admin_routes.router)
app.include_router(staff_routes.router)
app.include_router(catalog_routes.router)
app.include_router(agent_routes.router)
app.include_router(vendor_routes.router)


@app.get("/")
def read_root():
    return {"name": "Property Services Brokerage API", "version": "1.0.0"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)
