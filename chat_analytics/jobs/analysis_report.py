"""
Markdown Analysis Report Job for Chat Analytics.

Renders a metrics summary as a markdown report: KPIs, attribution, channel
and job type performance, customer split and data quality. Figures come
from calculate_advanced_analytics(), the same entry point the API uses.

Usage:
    from chat_analytics.jobs.analysis_report import generate_analysis_report, write_analysis_report

    # Render an existing summary
    markdown = generate_analysis_report(summary)

    # Compute and write a report for a batch of records
    path = write_analysis_report(records, "analysis-report.md")

Command line:
    python -m chat_analytics.jobs.analysis_report response.json -o analysis-report.md
"""

import argparse
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from chat_analytics.core.config import get_settings
from chat_analytics.models.schemas import ChatRecord, MetricsSummary, RankingLimits
from chat_analytics.services.ingestion import RecordValidationError, load_records_file
from chat_analytics.services.insights import calculate_advanced_analytics, top_job_types
from chat_analytics.services.status import format_duration

logger = logging.getLogger(__name__)


DEFAULT_REPORT_FILE = "analysis-report.md"


def _pct(count: float, total: float) -> str:
    """Format a count as a percentage string."""
    if not total:
        return "0.0%"
    return f"{count / total * 100:.1f}%"


def _table(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> List[str]:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(str(cell) for cell in row) + " |")
    return lines


def generate_analysis_report(
    summary: MetricsSummary,
    generated_at: Optional[datetime] = None,
    title: str = "Chat Analytics Report",
    job_type_limit: Optional[int] = None,
) -> str:
    """
    Generate markdown report content from a metrics summary.

    Sections:
    - Key performance indicators (funnel counts and rates)
    - Attribution (traffic split, sources, campaigns, click ids, referrers)
    - Channel performance
    - Job type performance
    - Customer insights
    - Quality and data quality

    Args:
        summary: Output of calculate_advanced_analytics().
        generated_at: Timestamp printed in the header (default: now, UTC).
        title: Report heading.
        job_type_limit: Job types listed (default: job_type_display_limit).

    Returns:
        str: Markdown document.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    total = summary.totalChats
    lines: List[str] = []

    # Header
    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"**Generated:** {generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}")
    lines.append(f"**Total Records Analyzed:** {total}")
    lines.append("")

    # KPIs
    lines.append("## Key Performance Indicators")
    lines.append("")
    lines.extend(_table(
        ["Metric", "Value", "Notes"],
        [
            ["Total Chats", total, "100%"],
            ["Bookable Chats", summary.bookableChats, f"{summary.bookableRate:.1f}% of chats"],
            ["Booked Chats", summary.bookedChats, _pct(summary.bookedChats, total) + " of chats"],
            ["Booking Rate", f"{summary.bookingRate:.1f}%", "Booked / Bookable"],
            ["Revenue Opportunities", summary.revenueOpportunities, "Bookable but not booked"],
            ["Avg Duration", format_duration(summary.avgDurationSeconds), "Chats with a duration"],
        ],
    ))
    lines.append("")

    # Attribution
    lines.append("## Attribution")
    lines.append("")
    lines.append("### Traffic Split")
    lines.append("")
    lines.extend(_table(
        ["Type", "Count", "Share"],
        [
            ["Direct", summary.directTraffic, _pct(summary.directTraffic, total)],
            ["Paid", summary.paidTraffic, _pct(summary.paidTraffic, total)],
            ["Organic", summary.organicTraffic, _pct(summary.organicTraffic, total)],
        ],
    ))
    lines.append("")

    lines.append("### Top Traffic Sources")
    lines.append("")
    if summary.topTrafficSources:
        lines.extend(_table(
            ["Source", "Name", "Paid", "Chats", "Bookable", "Booked", "Conv. Rate"],
            [
                [s.source, s.displayName, "yes" if s.isPaid else "no", s.count,
                 s.bookable, s.booked, f"{s.conversionRate:.1f}%"]
                for s in summary.topTrafficSources
            ],
        ))
    else:
        lines.append("_No attribution source data found in records_")
    lines.append("")

    lines.append("### Top Campaigns")
    lines.append("")
    if summary.topCampaigns:
        lines.extend(_table(
            ["Campaign", "Chats", "Bookable", "Booked", "Conv. Rate"],
            [[c.campaign, c.count, c.bookable, c.booked, f"{c.conversionRate:.1f}%"]
             for c in summary.topCampaigns],
        ))
    else:
        lines.append("_No campaign data found_")
    lines.append("")

    lines.append("### Click ID Distribution")
    lines.append("")
    if summary.clickIdBreakdown:
        lines.extend(_table(
            ["Platform", "Chats", "Booked", "Conv. Rate"],
            [[c.platform, c.count, c.booked, f"{c.conversionRate:.1f}%"]
             for c in summary.clickIdBreakdown],
        ))
    else:
        lines.append("_No click identifiers found_")
    lines.append("")

    lines.append("### Top Referrer Domains")
    lines.append("")
    if summary.topReferrers:
        lines.extend(_table(
            ["Domain", "Chats", "Booked", "Conv. Rate"],
            [[r.domain, r.count, r.booked, f"{r.conversionRate:.1f}%"]
             for r in summary.topReferrers],
        ))
    else:
        lines.append("_No referrer data found_")
    lines.append("")

    # Channels
    lines.append("## Channel Performance")
    lines.append("")
    lines.extend(_table(
        ["Channel", "Chats", "Bookable", "Booked", "Conv. Rate", "Share"],
        [[c.channel, c.count, c.bookable, c.booked, f"{c.conversionRate:.1f}%", _pct(c.count, total)]
         for c in summary.channelBreakdown],
    ))
    lines.append("")

    # Job types
    lines.append("## Job Type Performance")
    lines.append("")
    lines.extend(_table(
        ["Job Type", "Chats", "Bookable", "Booked", "Conv. Rate"],
        [[j.jobType, j.count, j.bookable, j.booked, f"{j.conversionRate:.0f}%"]
         for j in top_job_types(summary, job_type_limit)],
    ))
    lines.append("")

    # Customers
    lines.append("## Customer Insights")
    lines.append("")
    lines.extend(_table(
        ["Type", "Count", "Share"],
        [
            ["New Customers", summary.newCustomers, _pct(summary.newCustomers, total)],
            ["Existing Customers", summary.existingCustomers, _pct(summary.existingCustomers, total)],
        ],
    ))
    lines.append("")

    # Quality
    lines.append("## Quality")
    lines.append("")
    lines.append(
        f"**Incomplete Conversations:** {summary.incompleteConversations} "
        f"({_pct(summary.incompleteConversations, total)} of total)"
    )
    lines.append("")
    if summary.notBookableBreakdown:
        lines.extend(_table(
            ["Not Bookable Reason", "Label", "Count"],
            [[r.reason, r.label, r.count] for r in summary.notBookableBreakdown],
        ))
        lines.append("")
    if summary.topNotBookedReasons:
        lines.extend(_table(
            ["Not Booked Reason", "Count"],
            [[r.reason, r.count] for r in summary.topNotBookedReasons],
        ))
        lines.append("")

    quality = summary.dataQuality
    lines.append("### Data Quality")
    lines.append("")
    lines.extend(_table(
        ["Issue", "Count", "Notes"],
        [
            ["No WebSession Data", quality.noWebSession, "Records missing webSession"],
            ["No UTM Source", quality.noUtmSource, "Sessions without utm_source"],
            ["Unparseable Referrers", quality.unparseableReferrers, "Skipped in referrer domains"],
        ],
    ))
    lines.append("")

    return "\n".join(lines)


def write_analysis_report(
    records: Iterable[ChatRecord],
    output_path: Optional[Union[str, Path]] = None,
    limits: Optional[RankingLimits] = None,
    generated_at: Optional[datetime] = None,
) -> Path:
    """
    Compute the summary for a batch and write the markdown report.

    Args:
        records: Chat records to analyze.
        output_path: Destination file; defaults to Settings.report_output_path,
            then "analysis-report.md" in the working directory.
        limits: Optional top-N limits.
        generated_at: Optional header timestamp.

    Returns:
        Path of the written report.
    """
    target = Path(output_path or get_settings().report_output_path or DEFAULT_REPORT_FILE)

    summary = calculate_advanced_analytics(records, limits)
    content = generate_analysis_report(summary, generated_at=generated_at)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")

    logger.info(f"Wrote analysis report for {summary.totalChats} chats to {target}")
    return target


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command line entry point: analyze a saved record store response."""
    parser = argparse.ArgumentParser(description="Generate a markdown chat analytics report")
    parser.add_argument("input", help="JSON file with {\"list\": [...]} or a bare list of records")
    parser.add_argument("-o", "--output", default=None, help="Report destination")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        result = load_records_file(args.input)
    except (FileNotFoundError, RecordValidationError) as e:
        logger.error(f"Cannot load records: {e}")
        return 1

    path = write_analysis_report(result.records, args.output)
    print(f"Report generated: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
