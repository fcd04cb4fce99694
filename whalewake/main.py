from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from whalewake.core.auth_context import get_session_claim
from whalewake.core.config import settings
from whalewake.core.errors import (
    AppError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    OperationCancelled,
    UnauthorizedError,
    ValidationError,
)
from whalewake.core.logger import logger
from whalewake.db.init_db import init_db
from whalewake.db.session import SessionLocal, engine
from whalewake.db.store import Store
from whalewake.routers import auth, users
from whalewake.tokens.jwe_maker import JWETokenMaker

ERROR_STATUS = {
    ValidationError: 400,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    InternalError: 500,
    OperationCancelled: 504,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # a bad key stops the process here, not on the first request
    app.state.token_maker = JWETokenMaker.from_hex(
        settings.TOKEN_SYMMETRIC_KEY,
        refresh_duration=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    init_db(engine)
    app.state.store = Store(SessionLocal)
    logger.info(f"APP STARTED | env={settings.ENV}")
    yield
    engine.dispose()


app = FastAPI(
    title="WhaleWake Users Backend",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    status_code = 500
    for error_cls in type(exc).__mro__:
        if error_cls in ERROR_STATUS:
            status_code = ERROR_STATUS[error_cls]
            break

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message},
        headers=headers
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_errors(exc)}
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
        for err in exc.errors()
    ]


@app.middleware("http")
async def log_request(request: Request, call_next):
    response = await call_next(request)

    # set by the authorization gate on protected routes only
    claim = get_session_claim(request)
    account_id = claim.account_id if claim else "-"
    logger.info(
        f"REQUEST | {request.method} {request.url.path} | "
        f"status={response.status_code} | account_id={account_id}"
    )
    return response


app.include_router(auth.router)
app.include_router(users.router)


@app.get("/ping")
def ping():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("whalewake.main:app", host="0.0.0.0", port=8000)
