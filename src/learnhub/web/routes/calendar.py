"""Calendar endpoints: month view and study blocks."""

import structlog
from fastapi import APIRouter, HTTPException, Path, status

from learnhub.core.calendar_view import (
    DAY_NAMES,
    CalendarBlockError,
    add_study_block,
    build_month_view,
    shift_month,
)
from learnhub.core.recurrence import Frequency, plan_recurring_blocks
from learnhub.db.calendar_repository import delete_block, insert_blocks
from learnhub.utils.text_utils import clean_optional
from learnhub.utils.validators import normalize_time_range
from learnhub.web.schemas import (
    CalendarBlockCreate,
    CalendarBlockResponse,
    CalendarDayResponse,
    CalendarMonthResponse,
    CompletedLessonResponse,
    RecurringBlockCreate,
    RecurringBlocksResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/calendar", tags=["calendar"])


@router.get("/{year}/{month}", response_model=CalendarMonthResponse)
async def get_month(
    year: int = Path(..., ge=1, le=9998),
    month: int = Path(..., ge=1, le=12),
) -> CalendarMonthResponse:
    """Month grid (Sunday first) with study blocks and completed lessons per day."""
    view = build_month_view(year, month)

    cells = []
    for day in view.cells:
        if day is None:
            cells.append(None)
            continue
        key = day.isoformat()
        cells.append(
            CalendarDayResponse(
                date=day,
                blocks=[
                    CalendarBlockResponse.model_validate(b)
                    for b in view.blocks_by_date.get(key, [])
                ],
                completed_lessons=[
                    CompletedLessonResponse.model_validate(c)
                    for c in view.completions_by_date.get(key, [])
                ],
            )
        )

    return CalendarMonthResponse(
        year=year,
        month=month,
        label=view.label,
        day_names=DAY_NAMES,
        cells=cells,
        previous=shift_month(year, month, -1),
        next=shift_month(year, month, 1),
    )


@router.post("/blocks", response_model=CalendarBlockResponse, status_code=status.HTTP_201_CREATED)
async def create_block(body: CalendarBlockCreate) -> CalendarBlockResponse:
    """Add a single study block."""
    block = add_study_block(
        body.date,
        title=body.title,
        start_time=body.start_time,
        end_time=body.end_time,
        description=body.description,
    )
    return CalendarBlockResponse.model_validate(block)


@router.post(
    "/blocks/recurring",
    response_model=RecurringBlocksResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_recurring_blocks(body: RecurringBlockCreate) -> RecurringBlocksResponse:
    """Add the same study block on every matching day of the next N weeks."""
    title = clean_optional(body.title)
    if not title:
        raise CalendarBlockError("Please fill in all required fields")
    start_time, end_time = normalize_time_range(body.start_time, body.end_time)

    drafts = plan_recurring_blocks(
        start=body.start_date,
        frequency=Frequency(body.frequency),
        weeks=body.weeks,
        start_time=start_time,
        end_time=end_time,
        title=title,
        description=clean_optional(body.description),
        weekdays=set(body.weekdays) if body.weekdays else None,
    )
    blocks = insert_blocks(drafts)

    logger.info(
        "calendar.recurring_added",
        frequency=body.frequency,
        weeks=body.weeks,
        count=len(blocks),
    )
    return RecurringBlocksResponse(
        blocks=[CalendarBlockResponse.model_validate(b) for b in blocks],
        count=len(blocks),
    )


@router.delete("/blocks/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_block(block_id: str) -> None:
    """Delete a study block."""
    if not delete_block(block_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Calendar block '{block_id}' not found",
        )
