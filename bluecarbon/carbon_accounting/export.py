# -*- coding: utf-8 -*-
"""
Validation Results Export - BC-MRV-001: Carbon Accounting

Renders validated ecosystem records as CSV for download by verifiers.
Every field is quoted; errors and warnings are joined with ``"; "`` and a
missing species is written as ``N/A``.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Iterable, List

from bluecarbon.carbon_accounting.models import ValidatedRecord

logger = logging.getLogger(__name__)

CSV_HEADERS: List[str] = [
    "ID",
    "Ecosystem Type",
    "Latitude",
    "Longitude",
    "State",
    "District",
    "Species",
    "AGB",
    "BGB",
    "SOC",
    "Total Carbon",
    "Validation Status",
    "Errors",
    "Warnings",
    "Timestamp",
]


def _record_row(validated: ValidatedRecord) -> List[str]:
    record = validated.record
    pools = record.carbon_pools
    return [
        record.record_id,
        record.ecosystem_type,
        str(record.location.latitude),
        str(record.location.longitude),
        record.location.state,
        record.location.district,
        record.species or "N/A",
        str(pools.above_ground_biomass),
        str(pools.below_ground_biomass),
        str(pools.soil_organic_carbon),
        str(pools.total),
        validated.validation_status.value,
        "; ".join(validated.validation.errors),
        "; ".join(validated.validation.warnings),
        record.timestamp.isoformat(),
    ]


def export_validation_results(records: Iterable[ValidatedRecord]) -> str:
    """Export validated records as a CSV document.

    Args:
        records: Validated records in the order they should appear.

    Returns:
        CSV text with a header row and one row per record.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow(CSV_HEADERS)
    count = 0
    for validated in records:
        writer.writerow(_record_row(validated))
        count += 1

    logger.debug("Exported %d validated records to CSV", count)
    return output.getvalue()


__all__ = [
    "CSV_HEADERS",
    "export_validation_results",
]
