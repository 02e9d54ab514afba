import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from petbook.core.errors import PetbookError
from petbook.core.health_report import build_health_report
from petbook.database import get_db
from petbook.schemas.health_report_schema import HealthReportRequest

logger = logging.getLogger(__name__)


router = APIRouter(tags=["Health Report"])


def failed(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


# --------------------------------------------------
# EXPORT (batch-style contract: 400 {error} on any failure)
# --------------------------------------------------
@router.post("/export-health-report")
async def export_health_report(
    request: Request,
    db: Session = Depends(get_db),
):
    # Parsed by hand so a bad body gets the same 400 as every other failure
    try:
        payload = HealthReportRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as exc:
        logger.info("Health report request rejected: %s", exc)
        return failed("Invalid request body")

    try:
        return await run_in_threadpool(build_health_report, db, payload.pet_id, payload.format)
    except PetbookError as exc:
        logger.info("Health report for %s failed: %s", payload.pet_id, exc.message)
        return failed(exc.message)
    except SQLAlchemyError:
        logger.exception("Health report for %s failed in the store", payload.pet_id)
        return failed("Health report could not be generated")
