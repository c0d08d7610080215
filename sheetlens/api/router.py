# sheetlens/api/router.py
from fastapi import APIRouter

from sheetlens.api.endpoints import (
    auth,
    chart,
    files,
    insights
)
from sheetlens.schemas import ErrorResponse

# Every error leaves as {"error": "..."}
ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (400, 401, 404, 500)
}

api_router = APIRouter(responses=ERROR_RESPONSES)

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(files.router, tags=["Files"])
api_router.include_router(insights.router, tags=["Insights"])
api_router.include_router(chart.router, tags=["Chart Data"])
