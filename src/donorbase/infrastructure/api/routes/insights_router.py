"""Insights API routes.

Aggregates donations over selector and radio fields for chart rendering.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.logging import get_logger
from donorbase.domain.services import InsightsError, InsightsService
from donorbase.domain.services.donation_service import DonationService
from donorbase.infrastructure.api.dependencies import EventAccess
from donorbase.infrastructure.api.schemas import (
    FieldDistributionResponse,
    InsightsOverviewResponse,
)
from donorbase.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=InsightsOverviewResponse,
)
async def get_insights(
    event_id: str,
    access: EventAccess,
    session: AsyncSession = Depends(get_db_session),
) -> InsightsOverviewResponse:
    """Totals and one distribution per selector or radio field."""
    schema, records = await DonationService(session).list_with_schema(event_id)
    return InsightsOverviewResponse.from_overview(InsightsService.overview(schema, records))


@router.get(
    "/{field_id}",
    status_code=status.HTTP_200_OK,
    response_model=FieldDistributionResponse,
    responses={
        400: {"description": "Field is not a selector or radio field"},
        404: {"description": "Event or field not found"},
    },
)
async def get_field_distribution(
    event_id: str,
    field_id: str,
    access: EventAccess,
    session: AsyncSession = Depends(get_db_session),
) -> FieldDistributionResponse | JSONResponse:
    schema, records = await DonationService(session).list_with_schema(event_id)
    result = InsightsService.distribution(schema, records, field_id)
    if isinstance(result, InsightsError):
        logger.info(
            "Distribution unavailable",
            event_id=event_id,
            field_id=field_id,
            code=result.code,
        )
        return JSONResponse(
            status_code=(
                status.HTTP_404_NOT_FOUND
                if result.code == "field_not_found"
                else status.HTTP_400_BAD_REQUEST
            ),
            content={"error": result.code, "message": result.message},
        )
    return FieldDistributionResponse.from_distribution(result)
