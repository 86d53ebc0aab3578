"""
Plain-text rendering of availability reports.
"""

from typing import List

from .domain.models import AvailabilityReport

TITLE = "USER AVAILABILITY"
OUTER_RULE = "=" * 21
DAY_RULE = "-" * 25


def format_report(report: AvailabilityReport) -> str:
    """
    Render a report as grouped, human-readable text.

    One block per date in chronological order; a date without slots
    renders "No available slots".
    """
    lines: List[str] = [TITLE, OUTER_RULE]

    for day, slots in report:
        lines.append(f"{day.format('dddd', locale='en')} {day.to_date_string()}")
        lines.append(DAY_RULE)

        if not slots:
            lines.append("  No available slots")
        for slot in slots:
            lines.append(f"  {slot.format_display()}")

    lines.append(OUTER_RULE)
    return "\n".join(lines)


def format_summary(report: AvailabilityReport) -> str:
    hours, minutes = divmod(report.total_free_minutes, 60)
    return (
        f"Total free slots: {report.total_slots}\n"
        f"Total free time: {hours} h {minutes:02d} min"
    )
