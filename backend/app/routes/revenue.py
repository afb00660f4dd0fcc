"""Admin revenue endpoints. Thin routes; logic lives in services."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from adrevenue.services._types import RevenueSummaryDict
from adrevenue.services.export import ExportRequest, ExportService, GeneratedExport
from adrevenue.services.summary import RevenueSummaryService
from app.dependencies import get_db, require_admin
from app.schemas.common import ErrorResponse
from app.schemas.revenue import RevenueSummaryResponse
from db.models import Users

router: APIRouter = APIRouter(prefix="/api/admin", tags=["revenue"])

_ERRORS: dict[int | str, dict] = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get(
    "/revenue",
    response_model=RevenueSummaryResponse,
    response_model_by_alias=True,
    responses=_ERRORS,
)
def revenue_summary(
    range: str = Query("30d"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    _admin: Users = Depends(require_admin),
) -> RevenueSummaryDict:
    svc: RevenueSummaryService = RevenueSummaryService(db)
    return svc.get_summary(range, start_date, end_date)


@router.get(
    "/revenue/export",
    response_class=Response,
    responses={**_ERRORS, 413: {"model": ErrorResponse}, 501: {"model": ErrorResponse}},
)
def export_revenue(
    range: str = Query("30d"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    format: str = Query("csv"),
    type: str = Query("overview"),
    db: Session = Depends(get_db),
    _admin: Users = Depends(require_admin),
) -> Response:
    svc: ExportService = ExportService(db)
    generated: GeneratedExport = svc.generate_export(
        ExportRequest(
            report_type=type,
            format=format,
            range=range,
            start_date=start_date,
            end_date=end_date,
        )
    )
    return Response(
        content=generated.encoded.content,
        media_type=generated.encoded.media_type,
        headers={"Content-Disposition": generated.encoded.content_disposition},
    )
