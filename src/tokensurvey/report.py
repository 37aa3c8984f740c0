"""Report rendering for survey results."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from tokensurvey.advisor import Assessment
from tokensurvey.formatting import format_bytes, format_int, percent, round_half_up
from tokensurvey.scan.stats import AggregateStats, FileRecord


def banner(root: Path) -> str:
    return f"Analyzing codebase in {root}..."


def file_line(rec: FileRecord) -> str:
    return f"{rec.path}: {rec.tokens} tokens"


def render_text(stats: AggregateStats, assessment: Assessment) -> str:
    """Render the summary, breakdowns and CAG vs RAG analysis as plain text.

    Parameters
    ----------
    stats
        Finalized statistics.
    assessment
        Advisor output for ``stats``.

    Returns
    -------
    str
        Report text ending with a newline.
    """
    lines: list[str] = []
    lines.extend(_summary_lines(stats))
    lines.extend(_extension_lines(stats))
    lines.extend(_largest_lines(stats))
    lines.extend(_analysis_lines(assessment))
    return "\n".join(lines) + "\n"


def _summary_lines(stats: AggregateStats) -> list[str]:
    return [
        "",
        "==== Token Analysis Summary ====",
        f"Total files analyzed: {stats.total_files}",
        f"Total tokens: {format_int(stats.total_tokens)}",
        f"Total size: {format_bytes(stats.total_bytes)}",
        f"Average tokens per file: {format_int(stats.avg_tokens_per_file)}",
    ]


def _extension_lines(stats: AggregateStats) -> list[str]:
    lines = ["", "==== By File Extension ===="]
    for ext, data in stats.by_extension.items():
        share = percent(data.tokens, stats.total_tokens)
        lines.append(f"{ext}: {data.files} files, {format_int(data.tokens)} tokens ({share}%)")
    return lines


def _largest_lines(stats: AggregateStats) -> list[str]:
    lines = ["", "==== Largest Files (by tokens) ===="]
    for index, rec in enumerate(stats.largest_files, start=1):
        lines.append(f"{index}. {rec.path}: {format_int(rec.tokens)} tokens")
    return lines


def _analysis_lines(assessment: Assessment) -> list[str]:
    rec = assessment.recommendation
    lines = [
        "",
        "==== CAG vs RAG Analysis ====",
        f"Estimated embedding cost: ${assessment.embedding_cost:.2f}",
        "",
        f"Detected framework type: {assessment.framework.value.upper()}",
        "",
        "RAG (Retrieval-Augmented Generation) Considerations:",
        *assessment.rag_notes,
        f"- Estimated number of chunks: {assessment.estimated_chunks}",
    ]
    if assessment.rails_rag_notes:
        lines += ["", "Rails-specific RAG considerations:", *assessment.rails_rag_notes]

    lines += ["", "CAG (Context-Augmented Generation) Considerations:", *assessment.cag_notes]
    if assessment.rails_cag_notes:
        lines += ["", "Rails-specific CAG considerations:", *assessment.rails_cag_notes]

    lines += ["", f"Recommendation: {rec.tier.value}", *rec.guidance]
    if rec.tips_heading:
        lines += ["", rec.tips_heading, *rec.tips]
    return lines


def report_data(root: Path, stats: AggregateStats, assessment: Assessment) -> dict[str, Any]:
    """Build a JSON-serializable view of the report."""
    rec = assessment.recommendation
    return {
        "root": str(root),
        "summary": {
            "total_files": stats.total_files,
            "total_tokens": stats.total_tokens,
            "total_bytes": stats.total_bytes,
            "avg_tokens_per_file": round_half_up(stats.avg_tokens_per_file),
        },
        "by_extension": [
            {
                "extension": ext,
                "files": data.files,
                "tokens": data.tokens,
                "percent": percent(data.tokens, stats.total_tokens),
            }
            for ext, data in stats.by_extension.items()
        ],
        "largest_files": [
            {"rank": i, "path": r.path, "tokens": r.tokens, "bytes": r.size}
            for i, r in enumerate(stats.largest_files, start=1)
        ],
        "analysis": {
            "framework": assessment.framework.value,
            "embedding_cost": round(assessment.embedding_cost, 2),
            "estimated_chunks": assessment.estimated_chunks,
            "recommendation": rec.tier.value,
            "tips": list(rec.tips),
        },
    }


def render_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"


def render_yaml(data: dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
