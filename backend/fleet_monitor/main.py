import logging, time
from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import redis

from fleet_monitor import config
from fleet_monitor.routes import solar
from fleet_monitor.database import Base, SessionLocal, engine
from fleet_monitor import models  # noqa: F401  registers tables
from fleet_monitor.services.cache import redis_client

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Secure headers middleware
class SecureHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer'
        response.headers['Strict-Transport-Security'] = 'max-age=63072000; includeSubDomains; preload'
        return response

# Request logging middleware
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration = (time.time() - start_time) * 1000  # ms
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {duration:.2f}ms")
        return response

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Solar Fleet Monitor API",
    description="Telemetry, derived metrics and fleet statistics for solar generation sites",
    version="1.0.0"
)

# Enable compression
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# Add secure headers
app.add_middleware(SecureHeadersMiddleware)

# Add request logging middleware
app.add_middleware(LoggingMiddleware)

# API versioning: v1
app.include_router(solar.router, prefix="/api/v1", tags=["solar"])

@app.get("/")
def read_root():
    return {"message": "Welcome to Solar Fleet Monitor API", "docs": "/docs"}

@app.get("/health")
def health_check():
    db_status, redis_status = 'ok', 'ok'
    db = SessionLocal()
    try:
        db.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        db_status = f"error: {str(e)}"
    finally:
        db.close()
    try:
        if not redis_client.ping():
            redis_status = "error: cannot ping Redis"
    except redis.RedisError as e:
        redis_status = f"error: {str(e)}"
    return {"db": db_status, "redis": redis_status}

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
