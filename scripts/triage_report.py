#!/usr/bin/env python3
"""
Triage Report Script

Prints the back-office triage summary for the sales currently stored:
queue counts, aggregate metrics and the highest-priority cases.

Usage:
    python triage_report.py
    python triage_report.py --top 20
    python triage_report.py --priority HIGH --product PORTABILITY
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.priority import Priority
from domain.sale_status import ProductType
from domain.work_queue import WorkQueue
from repositories.sale_repository import list_sales
from services.sale_filter_service import SaleFilters, filter_sales
from services.triage_service import TriageFilters, TriageReport, triage_sales


def format_report(report: TriageReport, top: int) -> str:
    """Render a triage report as plain text."""
    m = report.metrics
    lines = [
        "=" * 60,
        f"TRIAGE REPORT (as of {report.as_of.isoformat()})",
        "=" * 60,
        f"Total cases:            {m.total_cases}",
        f"High priority:          {m.high_priority_count}",
        f"Medium priority:        {m.medium_priority_count}",
        f"Pending:                {m.pending_count}",
        f"Cancelled:              {m.cancelled_count}",
        f"Unclassifiable:         {m.unclassifiable_count}",
        f"Total value:            {m.total_value:.2f}",
        f"Average value:          {m.avg_value:.2f}",
        f"Urgency rate:           {m.urgency_rate:.1f}%",
        "",
        "Tracking queues:",
        "-" * 60,
    ]
    for queue in WorkQueue:
        lines.append(f"{queue.value:<28}{m.queue_count(queue)}")
    lines.append(f"{'(unbucketed)':<28}{m.queue_count(None)}")

    lines += ["", f"Top {top} cases ({report.shown_count} shown of {report.total_count}):", "-" * 60]
    for entry in report.entries[:top]:
        c = entry.classification
        queue = c.bucket.value if c.bucket else "-"
        lines.append(f"{c.sale_id:<12}{c.priority.value:<8}{queue:<26}{c.reason}")

    lines.append("=" * 60)
    return "\n".join(lines)


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Print the back-office triage report for stored sales",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full report, top 10 cases
  python triage_report.py

  # Only urgent portability cases
  python triage_report.py --priority HIGH --product PORTABILITY
        """
    )
    parser.add_argument("--top", type=int, default=10, help="Number of cases to list (default: 10)")
    parser.add_argument("--limit", type=int, default=1000, help="Maximum sales to fetch (default: 1000)")
    parser.add_argument("--priority", choices=[p.value for p in Priority], help="Only list this priority")
    parser.add_argument("--product", choices=[p.value for p in ProductType], help="Only include this product type")
    parser.add_argument("--verbose", action="store_true", help="Log unclassifiable sales")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.ERROR)

    try:
        sales = list_sales(limit=args.limit)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.product:
        sales = filter_sales(sales, SaleFilters(product_type=ProductType(args.product)))

    filters = TriageFilters(priority=Priority(args.priority)) if args.priority else None
    report = triage_sales(sales, filters=filters)

    print(format_report(report, args.top))
    return 0


if __name__ == "__main__":
    sys.exit(main())
