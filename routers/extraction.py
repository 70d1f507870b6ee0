"""
Task extraction router.

This router provides the POST /api/extract-tasks endpoint, which turns a pasted
meeting transcript into task candidates for the user to review.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from models.request_context import RequestContext
from models.task_request import ExtractTasksRequest, ExtractTasksResponse
from services.extraction_service import (
    EmptyTranscriptError,
    ExtractionError,
    ExtractionService,
)
from utils.context_utils import get_request_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["extraction"])

NO_TASKS_MESSAGE = "No tasks found"


def get_extraction_service() -> ExtractionService:
    return ExtractionService()


@router.post(
    "/extract-tasks",
    response_model=ExtractTasksResponse,
    response_model_exclude_none=True
)
async def extract_tasks(
    body: ExtractTasksRequest,
    context: RequestContext = Depends(get_request_context),
    service: ExtractionService = Depends(get_extraction_service),
):
    """
    Extract task candidates from a meeting transcript.

    Args:
        body: ExtractTasksRequest with the transcript text
        context: Authenticated caller

    Returns:
        ExtractTasksResponse with tasks, or an empty list and a message when
        no tasks were found

    Raises:
        HTTPException: 400 for an empty transcript, 502 when the model call fails
    """
    logger.info(
        f"Task extraction started: trace_id={context.trace_id}, "
        f"user_id={context.user_id}, transcript_length={len(body.transcript)}"
    )

    try:
        result = await service.extract(body.transcript, trace_id=context.trace_id)
    except EmptyTranscriptError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExtractionError:
        raise HTTPException(status_code=502, detail="Failed to extract tasks")

    if result.is_empty:
        logger.info(
            f"No tasks found: trace_id={context.trace_id}, "
            f"dropped={result.dropped_count}"
        )
        return ExtractTasksResponse(tasks=[], message=NO_TASKS_MESSAGE)

    return ExtractTasksResponse(tasks=result.candidates)
