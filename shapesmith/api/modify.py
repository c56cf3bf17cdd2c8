"""POST /api/modify and /api/path: run modifier stacks and single path modifiers."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from shapesmith.dependencies import get_modifier_stack
from shapesmith.engine.bridge import apply_path_result, shape_to_path
from shapesmith.engine.context import GroupContext, ShapeInstance, ShapeState, Transform
from shapesmith.engine.errors import UnknownModifierError
from shapesmith.engine.path_data import PathData
from shapesmith.engine.paths.noise_offset import NOISE_OFFSET
from shapesmith.engine.paths.simplify import SIMPLIFY
from shapesmith.engine.paths.smooth import SMOOTH
from shapesmith.engine.paths.subdivide import SUBDIVIDE
from shapesmith.engine.pipeline import ModifierStack, ModifierStep
from shapesmith.models.requests import GroupRequest, ModifyRequest, PathModifyRequest
from shapesmith.models.responses import InstanceModel, ModifyResponse, PathModifyResponse

router = APIRouter()
logger = logging.getLogger(__name__)

_PATH_MODIFIERS = {m.id: m for m in (SUBDIVIDE, SMOOTH, SIMPLIFY, NOISE_OFFSET)}


def _group_context(state: ShapeState, req: GroupRequest) -> GroupContext:
    gt = None
    if req.group_transform is not None:
        t = req.group_transform
        gt = Transform(x=t.x, y=t.y, rotation=t.rotation, scale_x=t.scale_x, scale_y=t.scale_y)
    auto = GroupContext.from_state(state, gt)
    return GroupContext(
        group_top_left=req.group_top_left or auto.group_top_left,
        group_width=auto.group_width if req.group_width is None else req.group_width,
        group_height=auto.group_height if req.group_height is None else req.group_height,
        group_transform=gt,
    )


def _instance_model(inst: ShapeInstance) -> InstanceModel:
    return InstanceModel(
        index=inst.index,
        shape=inst.shape,
        transform=inst.transform.to_dict(),
        metadata=inst.metadata,
    )


@router.post("/modify", response_model=ModifyResponse)
def modify(req: ModifyRequest, stack: ModifierStack = Depends(get_modifier_stack)) -> ModifyResponse:
    for step in req.steps:
        if step.id not in stack.registry:
            raise HTTPException(status_code=404, detail=str(UnknownModifierError(step.id)))

    state = ShapeState.from_shapes(req.shapes)
    group = _group_context(state, req.group) if req.group is not None else None
    steps = [ModifierStep(id=s.id, settings=s.settings, enabled=s.enabled) for s in req.steps]

    result = stack.run(state, steps, group)

    return ModifyResponse(
        instances=[_instance_model(inst) for inst in result.state.instances],
        processing_time_ms=round(result.processing_time_ms, 1),
        steps_completed=len(result.completed),
        steps_skipped=len(result.skipped),
        steps_failed=len(result.errors),
        errors=result.errors,
    )


@router.post("/path", response_model=PathModifyResponse)
def modify_path(req: PathModifyRequest) -> PathModifyResponse:
    modifier = _PATH_MODIFIERS.get(req.modifier)
    if modifier is None:
        raise HTTPException(status_code=404, detail=str(UnknownModifierError(req.modifier)))

    if req.path is not None:
        try:
            path = PathData.from_dict(req.path)
        except (KeyError, TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=f"Invalid path data: {e}") from e
        result = modifier.modify(path, req.settings)
        return PathModifyResponse(
            path=result.path_data.to_dict(),
            bounds_changed=result.bounds_changed,
            new_bounds=result.new_bounds.to_dict() if result.new_bounds else None,
        )

    if req.shape is None:
        raise HTTPException(status_code=422, detail="Provide either path or shape")

    path = shape_to_path(req.shape)
    if path is None:
        raise HTTPException(status_code=422, detail=f"Shape type {req.shape.type!r} has no path")

    result = modifier.modify(path, req.settings)
    shape = req.shape
    if result.bounds_changed:
        inst = ShapeState.from_shapes([req.shape]).instances[0]
        shape = apply_path_result(inst, path, result).shape
    logger.debug("%s on %s: bounds_changed=%s", req.modifier, req.shape.id, result.bounds_changed)
    return PathModifyResponse(
        path=result.path_data.to_dict(),
        bounds_changed=result.bounds_changed,
        new_bounds=result.new_bounds.to_dict() if result.new_bounds else None,
        shape=shape,
    )
