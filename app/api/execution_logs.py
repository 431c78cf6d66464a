"""
Execution Log API Routes

Thin delegation layer to ExecutionLogService.
Contains NO filtering, classification or formatting logic.

DESIGN RULE: each route calls exactly one service method and maps the
envelope's error code onto an HTTP status.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from app.dependencies import get_execution_log_service
from schemas.response import ApiResponse, ErrorCode
from services.execution_logs import ExecutionLogService


router = APIRouter(prefix="/ai-execution-log", tags=["execution-logs"])

_STATUS_CODES = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INTERNAL: 500,
}


def _respond(result: ApiResponse) -> JSONResponse:
    status_code = 200 if result.ok else _STATUS_CODES.get(result.error_code, 400)
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", exclude_none=True),
    )


@router.get("")
async def list_execution_logs(
    request: Request,
    service: ExecutionLogService = Depends(get_execution_log_service),
) -> JSONResponse:
    """List execution logs with filtering, sorting and pagination."""
    return _respond(await service.list_logs(dict(request.query_params)))


@router.get("/stats")
async def execution_log_stats(
    request: Request,
    service: ExecutionLogService = Depends(get_execution_log_service),
) -> JSONResponse:
    """Status counts and duration totals."""
    return _respond(await service.get_stats(dict(request.query_params)))


@router.get("/{log_id}")
async def get_execution_log(
    log_id: str,
    service: ExecutionLogService = Depends(get_execution_log_service),
) -> JSONResponse:
    """Execution log detail by store id or execution id."""
    return _respond(await service.get_detail(log_id))


@router.get("/{log_id}/steps")
async def get_execution_steps(
    log_id: str,
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: ExecutionLogService = Depends(get_execution_log_service),
) -> JSONResponse:
    """Paginated steps of one execution log."""
    return _respond(await service.get_steps(log_id, page=page, limit=limit))
