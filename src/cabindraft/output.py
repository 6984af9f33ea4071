"""Output formatters for draft status, season timeline and stay cost."""

import json
from datetime import datetime
from pathlib import Path

from cabindraft.models import BookingCost, DraftStatus, TurnRecord
from cabindraft.timing import to_pacific


def _fmt_instant(dt: datetime | None) -> str:
    """Pacific wall-clock rendering, e.g. 'Tue 03/03 10:00am PST'."""
    if dt is None:
        return "-"
    local = to_pacific(dt)
    return local.strftime("%a %m/%d %-I:%M%p %Z").replace("AM", "am").replace("PM", "pm")


def format_status(status: DraftStatus, season_name: str = "") -> str:
    """Format the current draft status as human-readable text."""
    lines = []
    lines.append("=" * 60)
    lines.append(f"{season_name or 'CABIN DRAFT'} STATUS")
    lines.append("=" * 60)
    lines.append(f"Phase:        {status.phase.value} (round {status.round})")
    lines.append(f"Draft start:  {_fmt_instant(status.draft_start)}")

    if status.active_picker is None:
        lines.append("Active:       none")
        return "\n".join(lines)

    note = ""
    if status.is_season_start:
        note = " (early access)"
    elif status.is_grace_period:
        note = " (grace period)"
    lines.append(f"Active:       {status.active_picker}{note}")
    lines.append(f"Next:         {status.next_picker or '-'}")
    lines.append(f"Window opens: {_fmt_instant(status.window_starts)}")
    lines.append(f"Window ends:  {_fmt_instant(status.window_ends)}")
    return "\n".join(lines)


def format_timeline(records: list[TurnRecord]) -> str:
    """Format the full season timeline, one line per turn."""
    lines = []
    lines.append("=" * 80)
    lines.append("SEASON TIMELINE")
    lines.append("=" * 80)

    current_round = None
    for rec in records:
        if rec.round != current_round:
            current_round = rec.round
            lines.append(f"\n--- ROUND {current_round} ---")
        lines.append(
            f"  {rec.index + 1:>2}. {rec.shareholder:<26} {rec.status.value:<12} "
            f"{_fmt_instant(rec.official_start):>22} -> {_fmt_instant(rec.end)}"
        )
    return "\n".join(lines)


def format_cost(cost: BookingCost) -> str:
    """Format a stay cost with its breakdown."""
    if cost.breakdown is None:
        return "No nights booked: $0"
    b = cost.breakdown
    lines = [
        f"{cost.nights} night{'s' if cost.nights != 1 else ''}: ${cost.total}"
        f" (avg ${cost.average_rate:.2f}/night)",
        f"  Weeknights: {b.weeknights} = ${b.weeknight_total}",
        f"  Weekends:   {b.weekends} = ${b.weekend_total}",
    ]
    if b.discount:
        lines.append(
            f"  Weekly discount: {b.full_weeks} full week{'s' if b.full_weeks != 1 else ''}"
            f" = -${b.discount}"
        )
    return "\n".join(lines)


def status_json(status: DraftStatus) -> str:
    return json.dumps(status.to_dict(), indent=2)


def timeline_json(records: list[TurnRecord]) -> str:
    return json.dumps([r.to_dict() for r in records], indent=2)


def write_outputs(status: DraftStatus, records: list[TurnRecord],
                  output_prefix: str = "output", season_name: str = ""):
    """Write status and timeline files into {output_prefix}/ directory."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    status_path = out_dir / "status.json"
    status_path.write_text(status_json(status))
    print(f"Written: {status_path}")

    timeline_path = out_dir / "timeline.json"
    timeline_path.write_text(timeline_json(records))
    print(f"Written: {timeline_path}")

    text_path = out_dir / "timeline.txt"
    text_path.write_text(format_status(status, season_name) + "\n\n" + format_timeline(records))
    print(f"Written: {text_path}")
