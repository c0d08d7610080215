# sheetlens/api/endpoints/insights.py
from fastapi import APIRouter, Depends

from sheetlens.api.dependencies import get_current_principal, get_services
from sheetlens.auth.base import Principal
from sheetlens.schemas import InsightRequest, InsightResponse
from sheetlens.services.container import Services

router = APIRouter()


@router.post("/insights", response_model=InsightResponse)
async def generate_insights(
        request: InsightRequest,
        principal: Principal = Depends(get_current_principal),
        services: Services = Depends(get_services)
):
    """Regenerate insights for a file; replaces the file's current insights"""
    record = await services.insights.generate(principal, request.file_id, data=request.data)
    return InsightResponse(insights=record)


@router.get("/insights/{file_id}", response_model=InsightResponse)
async def get_current_insights(
        file_id: str,
        principal: Principal = Depends(get_current_principal),
        services: Services = Depends(get_services)
):
    """Current insights of a file"""
    record = await services.insights.current(principal, file_id)
    return InsightResponse(insights=record)
