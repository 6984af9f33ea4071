"""Invariant checks over a computed season timeline."""

from collections import defaultdict

from cabindraft.models import TurnRecord, TurnStatus
from cabindraft.names import normalize_name
from cabindraft.timing import is_official_start
from cabindraft.turn_order import snake_order


def validate_timeline(records: list[TurnRecord], participants: list[str],
                      snaps_to_ten_am: bool = True,
                      aliases: dict[str, str] | None = None) -> dict:
    """Validate a timeline against the draft rules.

    Returns dict with:
    - valid: bool (True if no hard violations)
    - errors: list of hard violations
    - warnings: list of data-quality issues (e.g. out-of-order history)
    """
    errors = []
    warnings = []

    expected = snake_order(participants)
    if len(records) != len(expected):
        errors.append(f"Timeline has {len(records)} turns (expected {len(expected)})")

    for rec, name in zip(records, expected):
        if normalize_name(rec.shareholder, aliases) != normalize_name(name, aliases):
            errors.append(
                f"Turn {rec.index + 1}: {rec.shareholder} out of order (expected {name})"
            )
        expected_round = 1 if rec.index < len(participants) else 2
        if rec.round != expected_round:
            errors.append(
                f"Turn {rec.index + 1}: round {rec.round} (expected {expected_round})"
            )

    turn_counts = defaultdict(int)
    for rec in records:
        turn_counts[normalize_name(rec.shareholder, aliases)] += 1
    for p in participants:
        count = turn_counts.get(normalize_name(p, aliases), 0)
        if count != 2:
            errors.append(f"{p}: {count} turns (expected 2)")

    current = [rec for rec in records if rec.status.is_current()]
    if len(current) > 1:
        names = ", ".join(f"{r.index + 1} ({r.shareholder})" for r in current)
        errors.append(f"More than one current turn: {names}")

    if current:
        for rec in records[current[0].index + 1:]:
            if rec.status is TurnStatus.SKIPPED:
                errors.append(
                    f"Turn {rec.index + 1} ({rec.shareholder}) skipped after the current turn"
                )

    for prev, rec in zip(records, records[1:]):
        if rec.official_start < prev.official_start:
            warnings.append(
                f"Turn {rec.index + 1} ({rec.shareholder}) opens at "
                f"{rec.official_start.isoformat()}, before turn {prev.index + 1}"
            )

    if snaps_to_ten_am:
        for rec in records:
            if not is_official_start(rec.official_start):
                errors.append(
                    f"Turn {rec.index + 1} ({rec.shareholder}) opens at "
                    f"{rec.official_start.isoformat()}, not 10:00 AM Pacific"
                )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("DRAFT TIMELINE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no draft rule violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
