from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.execution_logs import router as execution_logs_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.dependencies import get_execution_log_service
from services.execution_logs import ExecutionLogService

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield

app = FastAPI(
    title=settings.service_name,
    version=settings.app_version,
    lifespan=lifespan
)

# CORS middleware - allow the admin UI to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(execution_logs_router, prefix="/v1")

@app.get("/health")
async def health(service: ExecutionLogService = Depends(get_execution_log_service)):
    store_ok = await service.ping()
    body = {
        "status": "healthy" if store_ok else "unhealthy",
        "service": settings.service_name,
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "database": "healthy" if store_ok else "unhealthy",
            "application": "healthy",
        },
    }
    return JSONResponse(status_code=200 if store_ok else 503, content=body)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.api_host, port=settings.api_port)
