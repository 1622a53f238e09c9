# -*- coding: utf-8 -*-
"""
Carbon Accounting API Routes - BC-MRV-001: Carbon Accounting

REST endpoints over ``CarbonAccountingService`` at prefix
``/api/v1/carbon-accounting``:

    POST /validate              Validate one ecosystem record
    POST /validate/batch        Validate a batch of records
    POST /estimate/plot         Plot-level carbon estimate
    POST /estimate/tree         Single-tree carbon estimate
    GET  /gps-accuracy          Classify a GPS fix
    GET  /records               List validated records
    GET  /records/{record_id}   Get one validated record
    GET  /statistics            Running validation statistics
    GET  /export                Validated records as CSV
    GET  /health                Service health

Handlers resolve the service from ``app.state`` (set by
``configure_carbon_accounting``) and fall back to the module singleton.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from bluecarbon.carbon_accounting.models import (
    CarbonAccountingStatistics,
    EstimatePlotRequest,
    GPSAccuracyResult,
    PlotCarbonEstimate,
    TreeCarbonEstimate,
    TreeMeasurement,
    ValidateBatchRequest,
    ValidatedRecord,
    ValidationStatus,
)
from bluecarbon.carbon_accounting.setup import (
    CarbonAccountingService,
    get_service,
)
from bluecarbon.exceptions import InvalidRecordError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/carbon-accounting",
    tags=["carbon-accounting"],
)


def _svc(request: Request) -> CarbonAccountingService:
    """Service configured on the app, else the module singleton."""
    service = getattr(request.app.state, "carbon_accounting_service", None)
    return service if service is not None else get_service()


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------


@router.post("/validate", response_model=ValidatedRecord)
async def post_validate_record(
    payload: Dict[str, Any] = Body(...),
    service: CarbonAccountingService = Depends(_svc),
) -> ValidatedRecord:
    """Validate one ecosystem record and store the verdict."""
    try:
        return service.validate_record(payload)
    except InvalidRecordError as exc:
        raise HTTPException(status_code=400, detail=exc.to_dict())


@router.post("/validate/batch")
async def post_validate_batch(
    request: ValidateBatchRequest,
    service: CarbonAccountingService = Depends(_svc),
) -> Dict[str, Any]:
    """Validate a batch of records; unparseable records are reported per index."""
    try:
        return service.validate_batch(request.records)
    except ValueError as exc:
        logger.warning("Rejected batch request: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))


# ----------------------------------------------------------------------
# Estimation
# ----------------------------------------------------------------------


@router.post("/estimate/plot", response_model=PlotCarbonEstimate)
async def post_estimate_plot(
    request: EstimatePlotRequest,
    service: CarbonAccountingService = Depends(_svc),
) -> PlotCarbonEstimate:
    return service.estimate_plot_carbon(request.measurements, request.polygon)


@router.post("/estimate/tree", response_model=TreeCarbonEstimate)
async def post_estimate_tree(
    measurement: TreeMeasurement,
    service: CarbonAccountingService = Depends(_svc),
) -> TreeCarbonEstimate:
    return service.estimate_tree(measurement)


@router.get("/gps-accuracy", response_model=GPSAccuracyResult)
async def get_gps_accuracy(
    accuracy: float = Query(..., ge=0.0, description="Accuracy radius (m)"),
    service: CarbonAccountingService = Depends(_svc),
) -> GPSAccuracyResult:
    return service.classify_gps_accuracy(accuracy)


# ----------------------------------------------------------------------
# Records
# ----------------------------------------------------------------------


@router.get("/records", response_model=List[ValidatedRecord])
async def get_records(
    ecosystem_type: Optional[str] = Query(None),
    status: Optional[ValidationStatus] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: CarbonAccountingService = Depends(_svc),
) -> List[ValidatedRecord]:
    """List validated records with optional filtering and pagination."""
    return service.list_records(
        ecosystem_type=ecosystem_type,
        status=status,
        limit=limit,
        offset=offset,
    )


@router.get("/records/{record_id}", response_model=ValidatedRecord)
async def get_record_by_id(
    record_id: str,
    service: CarbonAccountingService = Depends(_svc),
) -> ValidatedRecord:
    result = service.get_record(record_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return result


@router.get("/statistics", response_model=CarbonAccountingStatistics)
async def get_statistics(
    service: CarbonAccountingService = Depends(_svc),
) -> CarbonAccountingStatistics:
    return service.get_statistics()


@router.get("/export")
async def get_export(
    record_ids: Optional[List[str]] = Query(None),
    service: CarbonAccountingService = Depends(_svc),
) -> Response:
    """Download validated records as CSV."""
    content = service.export_csv(record_ids)
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition":
                'attachment; filename="validation_results.csv"',
        },
    )


@router.get("/health")
async def get_health(
    service: CarbonAccountingService = Depends(_svc),
) -> Dict[str, Any]:
    return service.health_check()
