# preference_center/api/preferences.py
import json
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError

from preference_center.api.identifier import InvalidIdentifierError, decode_customer_id
from preference_center.api.schemas import ErrorResponse, PreferencesView, UpdateRequest, UpdateResponse
from preference_center.customerio.client import CustomerIOClient, CustomerIOError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["preferences"])

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
INDEX_PAGE = STATIC_DIR / "index.html"

INVALID_PAYLOAD_MESSAGE = "Invalid preferences payload format"
FETCH_FAILED_MESSAGE = "Error fetching preferences"
UPDATE_FAILED_MESSAGE = "Failed to update preferences"


def get_customerio_client(request: Request) -> CustomerIOClient:
    """Vendor client created in the app lifespan; overridden in tests."""
    return request.app.state.customerio


@router.get(
    "/preferences/{encoded_id}/data",
    response_model=PreferencesView,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Get Preferences",
)
async def get_preferences(
    encoded_id: str,
    customerio: CustomerIOClient = Depends(get_customerio_client),
):
    try:
        customer_id = decode_customer_id(encoded_id)
    except InvalidIdentifierError as e:
        logger.warning(f"Rejected preferences read for {encoded_id!r}: {e}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})

    logger.info(f"Fetching preferences for customer_id: {customer_id}")
    try:
        return await customerio.fetch_preferences(customer_id)
    except CustomerIOError as e:
        logger.error(f"Error fetching preferences for {customer_id}: {e}")
        if e.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Customer not found"})
        if e.status_code == status.HTTP_401_UNAUTHORIZED:
            return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Unauthorized"})
    except Exception:
        logger.exception(f"Unexpected error fetching preferences for {customer_id}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": FETCH_FAILED_MESSAGE})


@router.post(
    "/preferences/{encoded_id}/data",
    response_model=UpdateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Update Preferences",
)
async def update_preferences(
    encoded_id: str,
    request: Request,
    customerio: CustomerIOClient = Depends(get_customerio_client),
):
    """
    The body is parsed by hand rather than declared as a parameter so that a
    bad identifier is reported before a bad body, and both as 400s.
    """
    try:
        customer_id = decode_customer_id(encoded_id)
    except InvalidIdentifierError as e:
        logger.warning(f"Rejected preferences update for {encoded_id!r}: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": str(e)},
        )

    try:
        update = UpdateRequest.model_validate(await request.json())
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        logger.warning(f"Rejected preferences payload for {customer_id}: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": INVALID_PAYLOAD_MESSAGE},
        )

    logger.info(f"Updating preferences for customer_id: {customer_id}")
    try:
        await customerio.update_preferences(customer_id, update)
    except Exception as e:
        logger.error(f"Error updating preferences for {customer_id}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(e) or UPDATE_FAILED_MESSAGE},
        )

    return UpdateResponse(success=True, message=f"Preferences updated successfully for customer {customer_id}")


@router.get("/preferences/{encoded_id}", include_in_schema=False)
async def preferences_page(encoded_id: str):
    return FileResponse(INDEX_PAGE, media_type="text/html")
