"""
Program Export Service

Exports generated programs to portable formats.

Supported formats:
- CSV (Google Sheets compatible, one row per set line)
- JSON (the program's dictionary form)

Programs are not stored, so exports work off a freshly generated
program rather than an id.
"""

import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from services.program_framework import GeneratedProgram
from services.program_framework.constants import WEIGHT_UNIT
from services.program_framework.day_composer import format_number

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Week",
    "Day",
    "Order",
    "Exercise",
    "Sets",
    "Reps",
    "Notes",
    "Set",
    "Percentage",
    f"Weight ({WEIGHT_UNIT})",
    "AMRAP",
]


@dataclass
class ExportResult:
    """Result of a program export operation."""
    success: bool
    format: str
    filename: str
    content: str  # The actual file content
    content_type: str  # MIME type
    row_count: int
    error: Optional[str] = None


def export_program_to_csv(program: GeneratedProgram) -> ExportResult:
    """
    Export a generated program to CSV.

    Accessories get one row each. Main lifts get one row per prescribed
    set with its percentage, weight and AMRAP flag.
    """
    if not program.weeks:
        return ExportResult(
            success=False,
            format="csv",
            filename="",
            content="",
            content_type="text/csv",
            row_count=0,
            error="Program has no weeks",
        )

    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow([f"# {program.title}"])
    writer.writerow([f"# {program.description}"])
    if program.training_maxes:
        maxes = ", ".join(
            f"{name}: {format_number(tm)} {WEIGHT_UNIT}" for name, tm in program.training_maxes.items()
        )
        writer.writerow([f"# Training maxes: {maxes}"])
    writer.writerow([f"# Exported: {datetime.now().strftime('%Y-%m-%d %H:%M')}"])
    writer.writerow([])

    writer.writerow(CSV_HEADERS)

    row_count = 0
    for week in program.weeks:
        for day in week.days:
            for order, exercise in enumerate(day.exercises, start=1):
                base = [
                    week.week_number,
                    f"{day.day_number} - {day.split_day}",
                    order,
                    exercise.name,
                    exercise.sets,
                    exercise.reps,
                    exercise.notes or "",
                ]
                if exercise.sets_details:
                    for detail in exercise.sets_details:
                        writer.writerow(base + [
                            detail.set_number,
                            f"{round(detail.percentage * 100)}%",
                            format_number(detail.calculated_weight),
                            "Yes" if detail.is_amrap else "",
                        ])
                        row_count += 1
                else:
                    writer.writerow(base + ["", "", "", ""])
                    row_count += 1

    content = output.getvalue()
    output.close()

    filename = f"{_sanitize_filename(program.title)}_{date.today().strftime('%Y%m%d')}.csv"

    logger.info(f"Exported program to CSV: {row_count} rows")

    return ExportResult(
        success=True,
        format="csv",
        filename=filename,
        content=content,
        content_type="text/csv; charset=utf-8",
        row_count=row_count,
    )


def export_program_to_json(program: GeneratedProgram) -> ExportResult:
    """Export a generated program to JSON with an export envelope."""
    export_data = {
        "export_version": "1.0",
        "exported_at": datetime.now().isoformat(),
        "program": program.to_dict(),
    }
    content = json.dumps(export_data, indent=2, ensure_ascii=False)

    filename = f"{_sanitize_filename(program.title)}_{date.today().strftime('%Y%m%d')}.json"
    day_count = sum(len(week.days) for week in program.weeks)

    logger.info(f"Exported program to JSON: {day_count} days")

    return ExportResult(
        success=True,
        format="json",
        filename=filename,
        content=content,
        content_type="application/json; charset=utf-8",
        row_count=day_count,
    )


def _sanitize_filename(name: str) -> str:
    """Sanitize a string for use as a filename."""
    result = name
    for char in '<>:"/\\|?*':
        result = result.replace(char, "_")

    result = "_".join(part for part in result.replace("-", " ").split() if part)
    return result[:50].strip("_") or "training_program"
