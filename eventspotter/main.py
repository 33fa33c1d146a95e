from fastapi import FastAPI, Request, APIRouter, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from eventspotter.api.v1.routes import auth as auth_router, events as events_router, health as health_router
from eventspotter.db.session import engine, Base
from eventspotter.db import models  # noqa: F401  (register tables on Base.metadata)
from eventspotter.cache.redis_client import cache
from eventspotter.core.config import settings
from eventspotter.core.errors import DomainError, ErrorCode
from eventspotter.core.logging import logger
from eventspotter.core.rate_limit import limiter

ERROR_STATUS = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_503_SERVICE_UNAVAILABLE,
}

app = FastAPI(title="EventSpotter")

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router.router)
api_router.include_router(events_router.router)
api_router.include_router(health_router.router)

app.include_router(api_router)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    status_code = ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc}")
    body = {"detail": exc.message, "code": exc.code.value}
    if exc.details:
        body["errors"] = exc.details
    return JSONResponse(status_code=status_code, content=body)


@app.on_event("startup")
async def on_startup():
    # create tables (simple approach; no migrations)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"EventSpotter started ({settings.ENVIRONMENT})")


@app.on_event("shutdown")
async def on_shutdown():
    cache.close()
    await engine.dispose()
