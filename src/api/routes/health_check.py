from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.api.envelope import SuccessEnvelope, success_envelope
from src.api.middleware import get_request_id

router = APIRouter(tags=["Health"])


class ServiceStatusResponse(BaseModel):
    service: str
    status: str


class HealthResponse(BaseModel):
    ok: bool


@router.get("/", response_model=SuccessEnvelope[ServiceStatusResponse])
async def service_status(request: Request):
    return success_envelope({"service": "api", "status": "ok"}, get_request_id(request))


@router.get("/health", response_model=SuccessEnvelope[HealthResponse])
async def health(request: Request):
    """Liveness probe; does not touch the database"""
    return success_envelope({"ok": True}, get_request_id(request))
