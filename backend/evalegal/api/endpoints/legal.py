"""
Legal analysis webhook endpoints.

Receives a contract analysis task from the CRM, runs the analysis and relays
the answer (or the failure) into the Bitrix chat the task came from.
"""
import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from evalegal.api.dependencies.services import get_bitrix_client, get_legal_controller
from evalegal.api.models import (
    ErrorResponse,
    LegalRequest,
    LegalResponse,
    describe_validation_error,
    normalize_chat_id,
)
from evalegal.controllers.legal_controller import LegalAnalysisController
from evalegal.services.bitrix import BitrixClient

logger = logging.getLogger(__name__)

ERROR_NOTICE_PREFIX = "Ошибка анализа: "
INTERNAL_ERROR_MESSAGE = "internal error"
METHOD_NOT_ALLOWED_TEXT = (
    "Method Not Allowed. This endpoint only accepts POST requests with a JSON body "
    "containing chatId, dealId, fileUrl and task."
)

# ============================================================================
# Router
# ============================================================================

router = APIRouter()


# ============================================================================
# Helpers
# ============================================================================


async def _read_payload(request: Request) -> dict:
    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="request body must be valid JSON"
        )
    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="request body must be a JSON object"
        )
    return payload


def _parse_request(payload: dict) -> LegalRequest:
    try:
        return LegalRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=describe_validation_error(e)
        )


async def _notify_failure(
    bitrix_client: BitrixClient,
    controller: LegalAnalysisController,
    chat_id: Optional[str],
    message: str,
) -> None:
    """Tell the chat the analysis failed. Never raises."""
    if not chat_id or not controller.is_chat_allowed(chat_id):
        return
    try:
        await bitrix_client.send_message(chat_id, f"{ERROR_NOTICE_PREFIX}{message}")
    except Exception as e:
        logger.warning(f"Could not deliver failure notice to chat {chat_id}: {e}")


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/legal",
    status_code=status.HTTP_200_OK,
    response_model=LegalResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request or document download failed"},
        403: {"model": ErrorResponse, "description": "Chat not allowed"},
        500: {"model": ErrorResponse, "description": "Analysis failed"},
    },
)
@router.post("/legal/", include_in_schema=False)
async def legal_analysis(
    request: Request,
    controller: LegalAnalysisController = Depends(get_legal_controller),
    bitrix_client: BitrixClient = Depends(get_bitrix_client),
) -> Any:
    """
    Analyze a contract and post the report into the requesting chat.

    Expects a JSON body with chatId, dealId, fileUrl and task. The response is
    200 once the analysis succeeded, whether or not the chat delivery went
    through; delivery failures are only logged.
    """
    chat_id: Optional[str] = None

    try:
        payload = await _read_payload(request)
        chat_id = normalize_chat_id(payload.get("chatId"))
        legal_request = _parse_request(payload)

        answer = await controller.process_legal_request(
            chat_id=legal_request.chat_id,
            deal_id=legal_request.deal_id,
            file_url=legal_request.file_url,
            task=legal_request.task,
        )
    except HTTPException as e:
        await _notify_failure(bitrix_client, controller, chat_id, e.detail)
        return JSONResponse(status_code=e.status_code, content={"error": e.detail})
    except Exception as e:
        logger.error(
            "Legal analysis failed",
            extra={"chat_id": chat_id, "error": str(e), "error_type": type(e).__name__},
            exc_info=True,
        )
        await _notify_failure(bitrix_client, controller, chat_id, INTERNAL_ERROR_MESSAGE)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )

    delivered = await bitrix_client.send_message(legal_request.chat_id, answer)
    if not delivered:
        logger.warning(f"Analysis for chat {legal_request.chat_id} was not delivered")

    return LegalResponse(ok=True)


@router.get("/legal", response_class=PlainTextResponse, include_in_schema=False)
@router.get("/legal/", response_class=PlainTextResponse, include_in_schema=False)
async def legal_method_not_allowed() -> PlainTextResponse:
    """Only POST is supported on the webhook."""
    return PlainTextResponse(METHOD_NOT_ALLOWED_TEXT, status_code=status.HTTP_405_METHOD_NOT_ALLOWED)
