"""Export API routes.

Downloads an event's donations as CSV or JSON. Available to both roles.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.config import get_settings
from donorbase.core.logging import get_logger
from donorbase.domain.services import ExportService
from donorbase.domain.services.donation_service import DonationService
from donorbase.domain.services.event_service import EventService
from donorbase.infrastructure.api.dependencies import EventAccess
from donorbase.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()


def _attachment(filename: str) -> dict[str, str]:
    # Event names may contain non-latin-1 characters
    return {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}


@router.get(
    "/csv",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_csv(
    event_id: str,
    access: EventAccess,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Donations newest first with the current field labels as columns."""
    event = await EventService(session).get(event_id)
    schema, records = await DonationService(session).list_with_schema(event_id)
    content = ExportService.to_csv(schema, records, get_settings().export_currency_label)
    filename = ExportService.filename(event, "csv")

    logger.info("Donations exported", event_id=event_id, format="csv", rows=len(records))
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers=_attachment(filename),
    )


@router.get(
    "/json",
    status_code=status.HTTP_200_OK,
)
async def export_json(
    event_id: str,
    access: EventAccess,
    session: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    """Event summary, current fields and every donation with its full value map."""
    event = await EventService(session).get(event_id)
    schema, records = await DonationService(session).list_with_schema(event_id)
    document = ExportService.to_json(event, schema, records)
    filename = ExportService.filename(event, "json")

    logger.info("Donations exported", event_id=event_id, format="json", rows=len(records))
    return JSONResponse(content=document, headers=_attachment(filename))
