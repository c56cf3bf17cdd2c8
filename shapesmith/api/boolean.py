"""POST /api/boolean: combine shapes with a polygon boolean operation."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from shapesmith.dependencies import get_boolean_engine
from shapesmith.engine.boolean import BooleanEngine
from shapesmith.engine.context import ShapeState, collective_bounds
from shapesmith.engine.errors import BooleanOperationError
from shapesmith.models.requests import BooleanRequest
from shapesmith.models.responses import BooleanResponse, CacheClearResponse

router = APIRouter()


@router.post("/boolean", response_model=BooleanResponse)
def boolean(req: BooleanRequest, engine: BooleanEngine = Depends(get_boolean_engine)) -> BooleanResponse:
    context = None
    if req.preserve_collective_position:
        context = collective_bounds(ShapeState.from_shapes(req.shapes))
    try:
        result = engine.combine(req.shapes, req.operation, context)
    except BooleanOperationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return BooleanResponse(
        shape=result.shape,
        operation=result.operation.value,
        polygon=[[list(map(list, ring)) for ring in poly] for poly in result.polygon],
        style_source_id=result.style_source_id,
        cache_size=engine.cache.size,
    )


@router.delete("/boolean/cache", response_model=CacheClearResponse)
def clear_cache(engine: BooleanEngine = Depends(get_boolean_engine)) -> CacheClearResponse:
    return CacheClearResponse(cleared=engine.cache.clear())
