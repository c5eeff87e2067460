"""
Realtime API
Synthetic live metrics for the dashboard's realtime cards.
"""

from fastapi import APIRouter, Depends

from ..core import RealtimeSnapshot
from ..services import MetricGenerator, build_snapshot, get_realtime_generator


router = APIRouter(tags=["Realtime"])


@router.get("/realtime", response_model=RealtimeSnapshot)
async def get_realtime_metrics(generate: MetricGenerator = Depends(get_realtime_generator)):
    """
    Freshly generated snapshot.

    Nothing is persisted; each request produces new values under the same
    metric names.
    """
    return build_snapshot(generate)
