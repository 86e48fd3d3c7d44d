from typing import Optional

from anyio import to_thread
from fastapi import APIRouter, Depends, Header, HTTPException, status

from ..config import Settings, get_settings
from ..exceptions import AuditError
from ..logging import jlog
from ..schemas import AuditRequest, AuditResponse, ErrorResponse
from ..service import ClientFactory, generate_audit_html, make_client

router = APIRouter()

def get_client_factory() -> ClientFactory:
    return make_client

@router.post(
    "/audit",
    response_model=AuditResponse,
    summary="Audit a translation against its source and render the report as HTML",
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def audit_translation(
    payload: AuditRequest,
    settings: Settings = Depends(get_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
    x_correlation_id: Optional[str] = Header(default=None),
) -> AuditResponse:
    try:
        # Offload to worker thread so we don't block event loop
        return await to_thread.run_sync(
            generate_audit_html, payload, settings, client_factory, x_correlation_id
        )
    except AuditError as e:
        jlog(event="audit_failed", severity="ERROR", error_type=type(e).__name__, error=str(e), correlation_id=x_correlation_id)
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception as e:
        jlog(event="audit_failed", severity="ERROR", error_type=type(e).__name__, error=str(e), correlation_id=x_correlation_id)
        raise HTTPException(status_code=500, detail=str(e) or "Server error")
