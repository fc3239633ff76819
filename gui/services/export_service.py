"""Export service: reports for the current analysis result.

JSON for machine consumers, an Excel workbook (pandas + openpyxl) and a
compact PDF summary (reportlab canvas).
"""

from __future__ import annotations

import io
import json
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd
from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from gui.utils.logging import log
from microscopy.models.schemas import AnalysisResult
from microscopy.processing.statistics import DerivedStatistics, compute_statistics

EXPORT_FORMATS = ("json", "xlsx", "pdf")


def export_json(result: AnalysisResult, stats: Optional[DerivedStatistics] = None) -> Dict[str, Any]:
    """Result payload plus derived statistics as a JSON-serializable dict."""
    stats = stats or compute_statistics(result)
    return {
        "result": result.to_payload(),
        "statistics": {
            "total": stats.total,
            "shares": [
                {"name": s.name, "count": s.count, "percentage": s.percentage}
                for s in stats.shares
            ],
        },
    }


def build_excel_bytes(result: AnalysisResult, stats: Optional[DerivedStatistics] = None) -> bytes:
    """Workbook with Summary, Species and Alerts sheets."""
    stats = stats or compute_statistics(result)
    env = result.environmental
    summary = pd.DataFrame(
        {
            "Field": [
                "Scan ID",
                "Image",
                "Total Organisms",
                "Unique Species",
                "Location",
                "Temperature",
                "Timestamp (UTC)",
            ],
            "Value": [
                result.id,
                result.image_ref,
                result.total_organisms,
                result.unique_species_count,
                env.location,
                env.temperature,
                env.timestamp_utc.isoformat(),
            ],
        }
    )
    species = pd.DataFrame(
        {
            "Species": [s.name for s in stats.shares],
            "Count": [s.count for s in stats.shares],
            "Percentage": [s.percentage for s in stats.shares],
        }
    )
    alerts = pd.DataFrame(
        {
            "Name": [a.name for a in result.high_risk_alerts],
            "Species": [a.species for a in result.high_risk_alerts],
            "Count": [a.count for a in result.high_risk_alerts],
            "Risk Level": [a.risk_level for a in result.high_risk_alerts],
        }
    )

    buf = io.BytesIO()
    try:
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            summary.to_excel(writer, sheet_name="Summary", index=False)
            species.to_excel(writer, sheet_name="Species", index=False)
            alerts.to_excel(writer, sheet_name="Alerts", index=False)
    except Exception as e:
        raise RuntimeError(f"Error exporting to Excel: {e}") from e
    return buf.getvalue()


def build_pdf_bytes(result: AnalysisResult, stats: Optional[DerivedStatistics] = None) -> bytes:
    """One-page (or more, for long lists) PDF analysis report."""
    stats = stats or compute_statistics(result)
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    w, h = letter
    y = h - 0.9 * inch

    def line(text: str, size: int = 10, bold: bool = False, step: float = 0.2):
        nonlocal y
        if y < 1.0 * inch:
            c.showPage()
            y = h - 0.9 * inch
        c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        c.drawString(0.8 * inch, y, text)
        y -= step * inch

    env = result.environmental
    line("Microscopy Sample Analysis Report", size=16, bold=True, step=0.4)
    line(f"Scan ID: {result.id}", size=9)
    line(f"Captured: {env.timestamp_utc.strftime('%Y-%m-%d %H:%M:%S UTC')}", size=9, step=0.35)

    line("Summary", size=12, bold=True, step=0.25)
    line(f"Total organisms counted: {result.total_organisms}")
    line(f"Unique species detected: {result.unique_species_count}")
    line(f"Location: {env.location}")
    line(f"Temperature: {env.temperature}", step=0.35)

    line("High-risk alerts", size=12, bold=True, step=0.25)
    if not result.high_risk_alerts:
        line("(none)")
    for a in result.high_risk_alerts:
        line(f"{a.name} ({a.species}): count {a.count}, risk {a.risk_level}")
    y -= 0.15 * inch

    line(f"Species distribution (total {stats.total})", size=12, bold=True, step=0.25)
    for s in stats.shares:
        line(f"{s.name}: {s.count} ({s.percentage}%)")

    c.showPage()
    c.save()
    return buf.getvalue()


def _safe_filename(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]+", "_", text).strip("_") or "scan"


def export_to_file(
    result: AnalysisResult,
    fmt: str,
    directory: Union[str, Path],
    name: Optional[str] = None,
) -> Path:
    """Write the report in ``fmt`` (json | xlsx | pdf) and return its path."""
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    stats = compute_statistics(result)
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{_safe_filename(name or result.id)}.{fmt}"

    if fmt == "json":
        path.write_text(json.dumps(export_json(result, stats), indent=2), encoding="utf-8")
    elif fmt == "xlsx":
        path.write_bytes(build_excel_bytes(result, stats))
    else:
        path.write_bytes(build_pdf_bytes(result, stats))

    log(f"Exported {result.id} to {path}")
    return path
