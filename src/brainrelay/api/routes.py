"""HTTP routes for the relay pipeline."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from brainrelay.api.schemas import (
    ErrorResponse,
    ProcessRequest,
    ProcessResponse,
    StageContentResponse,
)
from brainrelay.errors import ValidationError
from brainrelay.pipeline.orchestrator import Orchestrator, validate_brain_dump
from brainrelay.pipeline.stages import STAGES_BY_NAME

logger = logging.getLogger(__name__)

PIPELINE_FAILURE_MESSAGE = "Failed to process AI workflow."

router = APIRouter()


def get_orchestrator(request: Request) -> Orchestrator:
    """Orchestrator built by the application lifespan."""
    return request.app.state.orchestrator


def get_user_id(request: Request) -> str:
    """Resolve the user id for this request."""
    return request.app.state.user_resolver.resolve(request)


@router.post(
    "/process",
    response_model=ProcessResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def process_brain_dump(
    payload: ProcessRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
    user_id: str = Depends(get_user_id),
):
    """Run the full assistant pipeline over a brain dump."""
    try:
        brain_dump = validate_brain_dump(payload.brain_dump)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        result = await orchestrator.process(
            brain_dump,
            trigger_brand_analysis=bool(payload.trigger_brand_analysis),
            user_id=user_id,
        )
    except Exception:
        logger.exception("Error in processing")
        return JSONResponse(status_code=500, content={"error": PIPELINE_FAILURE_MESSAGE})

    return result.to_response()


@router.get(
    "/stages/{stage_name}",
    response_model=StageContentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_stage_content(
    stage_name: str,
    orchestrator: Orchestrator = Depends(get_orchestrator),
    user_id: str = Depends(get_user_id),
):
    """Latest stored output of one stage for the requesting user."""
    stage = STAGES_BY_NAME.get(stage_name)
    if stage is None:
        return JSONResponse(status_code=404, content={"error": f"Unknown stage: {stage_name}"})

    content = await orchestrator.store.get_latest(user_id, stage.collection)
    return {"stage": stage.name, "user_id": user_id, "content": content}
