from fastapi import APIRouter, Depends

from app.models.schemas import ERROR_RESPONSES, ProbeRequest, ProbeResult
from app.services.http_probe import HttpProbe
from app.core.dependencies import get_http_probe

router = APIRouter(tags=["probe"], responses=ERROR_RESPONSES)


@router.post("/test-api", response_model=ProbeResult)
async def test_api(
    request: ProbeRequest,
    probe: HttpProbe = Depends(get_http_probe)
):
    """Forward a request to the target URL and report the response"""
    return await probe.send(request)
