# sheetlens/api/endpoints/chart.py
from fastapi import APIRouter, Depends

from sheetlens.api.dependencies import get_current_principal, get_services
from sheetlens.auth.base import Principal
from sheetlens.schemas import ChartDataResponse
from sheetlens.services.container import Services

router = APIRouter()


@router.get("/chart-data/{file_id}", response_model=ChartDataResponse)
async def get_chart_data(
        file_id: str,
        principal: Principal = Depends(get_current_principal),
        services: Services = Depends(get_services)
):
    """Full tabular projection of a file; axis and chart selection happen client-side"""
    dataset = await services.charts.get(principal, file_id)
    return ChartDataResponse(chart_data=dataset)
