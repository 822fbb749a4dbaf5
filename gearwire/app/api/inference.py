from __future__ import annotations

from fastapi import APIRouter, Depends

from gearwire.app.api.deps import get_container
from gearwire.app.core.container import AppContainer
from gearwire.app.models.connection import (
    InferenceOptions,
    InferenceRequest,
    InferenceResult,
    RecommendationRequest,
)

router = APIRouter(tags=["inference"])


@router.post("/inference", response_model=InferenceResult)
async def infer_connections(
    request: InferenceRequest,
    container: AppContainer = Depends(get_container),
) -> InferenceResult:
    return container.inference_service.infer(
        request.instances,
        request.connections,
        InferenceOptions(clock_master_ids=set(request.clock_master_ids)),
    )


@router.post("/recommendations", response_model=list[str])
async def recommend_between_devices(
    request: RecommendationRequest,
    container: AppContainer = Depends(get_container),
) -> list[str]:
    device_a = container.catalog_service.require_device(request.device_a_id)
    device_b = container.catalog_service.require_device(request.device_b_id)
    return container.recommendation_service.recommend_between(device_a, device_b)
