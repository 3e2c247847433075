import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from app.api.schemas import ErrorOut, PredictOut, StatsOut
from app.services import PredictorService
from app.upstream import UpstreamError

log = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> PredictorService:
    return request.app.state.service


@router.get('/api/taixiu/predict', response_model=PredictOut, response_model_exclude_unset=True,
            responses={500: {"model": ErrorOut}})
def predict(service: PredictorService = Depends(get_service)):
    try:
        return PredictOut(**service.refresh_and_predict())
    except UpstreamError as e:
        log.error("upstream fetch failed: %s", e)
        return JSONResponse({"error": "API lỗi", "chi_tiet": str(e)}, status_code=500)


@router.get('/stats', response_model=StatsOut)
def stats(window: int | None = Query(default=None, ge=1), service: PredictorService = Depends(get_service)):
    return service.get_stats(window)
