"""FastAPI router for the Image Agent service."""

import base64
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.uploads import UploadError, staged_upload
from src.llm import UpstreamErrorKind, UpstreamModelError, configured_model_name
from src.services.image_agent.models import (
    AgentMetadata,
    AgentOutcome,
    AgentProbeRequest,
    AgentProbeResponse,
    AnalysisRequest,
    AnalyzeImageResponse,
    ErrorResponse,
)
from src.services.image_agent.service import image_agent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["image-agent"])

# 1x1 transparent PNG used by /api/test-agent
TEST_IMAGE_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    402: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def upstream_error_response(error: UpstreamModelError) -> JSONResponse:
    """Map an upstream model failure to a categorized HTTP error."""
    if error.kind == UpstreamErrorKind.QUOTA_EXCEEDED:
        return error_response(402, "Model API quota exceeded")
    if error.kind == UpstreamErrorKind.INVALID_CREDENTIALS:
        return error_response(401, "Invalid model API key")
    return error_response(500, str(error) or "Internal server error")


def _agent_payload(outcome: AgentOutcome) -> dict:
    return {
        "analysis": outcome.final_answer,
        "model": configured_model_name(),
        "agent": AgentMetadata.from_outcome(outcome),
    }


@router.post(
    "/analyze-image",
    response_model=AnalyzeImageResponse,
    responses=ERROR_RESPONSES,
)
async def analyze_image(
    image: Optional[UploadFile] = File(None),
    prompt: Optional[str] = Form(None),
):
    """
    Analyze an uploaded image, enriching the answer with web search if useful.

    - image: image/* file up to MAX_UPLOAD_BYTES
    - prompt: optional instruction, defaults to a plain description request
    """
    if image is None:
        return error_response(400, "No image file provided")

    instruction = (prompt or "").strip() or settings.default_prompt
    logger.info(f"Processing image: {image.filename}")
    logger.info(f"Prompt: {instruction}")

    try:
        async with staged_upload(image) as path:
            request = AnalysisRequest(
                image_bytes=path.read_bytes(),
                instruction_text=instruction,
                mime_type=image.content_type or "image/jpeg",
            )
            outcome = await image_agent.analyze(request)

    except UploadError as e:
        logger.warning(f"Rejected upload {image.filename!r}: {e}")
        return error_response(400, str(e))
    except OSError as e:
        logger.error(f"Failed to read image: {e}")
        return error_response(400, "Invalid image file")
    except UpstreamModelError as e:
        logger.error(f"Error processing image: {e}")
        return upstream_error_response(e)
    except Exception as e:
        logger.exception(f"Error processing image: {e}")
        return error_response(500, str(e) or "Internal server error")

    logger.info("Analysis completed successfully")
    return AnalyzeImageResponse(**_agent_payload(outcome))


@router.post(
    "/test-agent",
    response_model=AgentProbeResponse,
    responses=ERROR_RESPONSES,
)
async def test_agent(request: AgentProbeRequest):
    """
    Run the agent against a built-in 1x1 test image.

    Useful for checking the decision/search/fusion path without uploading.
    """
    if not request.prompt or not request.prompt.strip():
        return error_response(400, "Prompt is required")

    try:
        outcome = await image_agent.analyze(
            AnalysisRequest(
                image_bytes=TEST_IMAGE_PNG,
                instruction_text=request.prompt,
                mime_type="image/png",
            )
        )
    except UpstreamModelError as e:
        logger.error(f"Test agent error: {e}")
        return upstream_error_response(e)
    except Exception as e:
        logger.exception(f"Test agent error: {e}")
        return error_response(500, str(e) or "Test agent failed")

    return AgentProbeResponse(**_agent_payload(outcome))
