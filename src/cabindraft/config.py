"""Config and booking-history loading for the cabin draft."""

import logging
from datetime import date, datetime
from pathlib import Path

import yaml

from cabindraft.models import DEFAULT_DRAFT_START, Action, ActionKind, DraftSettings
from cabindraft.names import canonical_name, normalize_name
from cabindraft.timing import PACIFIC, as_instant, as_pacific_date
from cabindraft.turn_order import season_order

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Config file that cannot describe a draft season."""


def parse_date(s: str) -> date:
    """Parse date string YYYY-MM-DD."""
    parts = s.strip().split("-")
    return date(int(parts[0]), int(parts[1]), int(parts[2]))


def parse_datetime(value) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z', explicit offsets, plain dates and datetime
    objects. Values without an offset are Pacific wall-clock time.
    Raises ValueError when the value is not a timestamp.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=PACIFIC)
    instant = as_instant(value if isinstance(value, datetime) else str(value))
    if instant is None:
        raise ValueError(f"Not a timestamp: {value!r}")
    return instant


def _parse_optional_datetime(value, field_name: str, record_id: str) -> datetime | None:
    if value is None or value == "":
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        logger.warning("Booking %s: unreadable %s %r, ignoring", record_id, field_name, value)
        return None


def load_config(path: str | Path) -> dict:
    """Load and validate config YAML, returning structured data.

    Returns dict with:
    - season: {year, name, draft_start, season_start, season_end}
    - participants: ordered list of names for season.year
    - name_aliases: dict[alternate spelling -> canonical name]
    - settings: DraftSettings

    Raises ConfigError listing every problem found.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    errors = []
    raw_season = raw.get("season", {})

    # Season
    year = date.today().year
    try:
        year = int(raw_season.get("year", year))
    except (TypeError, ValueError):
        errors.append(f"season.year: not a year: {raw_season.get('year')!r}")
    draft_start = DEFAULT_DRAFT_START
    if raw_season.get("draft_start") is not None:
        try:
            draft_start = parse_datetime(raw_season["draft_start"])
        except ValueError as e:
            errors.append(f"season.draft_start: {e}")

    season = {
        "year": year,
        "name": raw_season.get("name", ""),
        "draft_start": draft_start,
        "season_start": None,
        "season_end": None,
    }
    for key in ("season_start", "season_end"):
        if raw_season.get(key) is not None:
            try:
                season[key] = parse_date(str(raw_season[key]))
            except (IndexError, ValueError):
                errors.append(f"season.{key}: not a date: {raw_season[key]!r}")

    # Participants
    base = raw.get("base_order", {})
    base_year = int(base.get("base_year", year))
    overrides = {
        int(y): list(order) for y, order in raw.get("order_overrides", {}).items()
    }
    participants = season_order(list(base.get("participants", [])), base_year, year, overrides)
    if not participants:
        errors.append(f"No participants for season {year}")

    # Aliases
    name_aliases = {str(k): str(v) for k, v in raw.get("name_aliases", {}).items()}
    participant_keys = {normalize_name(p) for p in participants}
    for alt, canonical in name_aliases.items():
        if normalize_name(canonical) not in participant_keys:
            logger.warning("Alias %r points at %r, who is not a participant", alt, canonical)

    seen = set()
    for p in participants:
        key = normalize_name(p, name_aliases)
        if key in seen:
            errors.append(f"Participant {p} listed twice")
        seen.add(key)

    # Timing
    settings = None
    try:
        settings = DraftSettings(
            draft_start=draft_start,
            pick_duration_days=raw_season.get("pick_duration_days", 2),
            fast_testing_mode=bool(raw_season.get("fast_testing_mode", False)),
            bypass_ten_am=bool(raw_season.get("bypass_ten_am", False)),
        )
    except (TypeError, ValueError) as e:
        errors.append(f"season.pick_duration_days: {e}")

    if errors:
        raise ConfigError("Config validation errors:\n" + "\n".join(f"  {e}" for e in errors))

    return {
        "season": season,
        "participants": participants,
        "name_aliases": name_aliases,
        "settings": settings,
    }


def action_from_record(record: dict, aliases: dict[str, str] | None = None) -> Action:
    """Build an Action from a stored booking record.

    Missing or unreadable timestamps become None; the scheduler deals with
    them. An unknown booking type is treated as a booking.
    """
    record_id = str(record.get("id", ""))
    name = record.get("shareholder") or record.get("shareholderName") or record.get("name") or ""

    try:
        kind = ActionKind.from_str(record.get("type"))
    except ValueError:
        logger.warning("Booking %s: unknown type %r, treating as booking",
                       record_id, record.get("type"))
        kind = ActionKind.BOOKING

    created = record.get("created_at", record.get("createdAt"))
    cancelled = record.get("cancelled_at", record.get("cancelledAt"))
    finalized = record.get("is_finalized", record.get("isFinalized", True))

    return Action(
        shareholder=canonical_name(name, aliases),
        kind=kind,
        created_at=_parse_optional_datetime(created, "created_at", record_id),
        cancelled_at=_parse_optional_datetime(cancelled, "cancelled_at", record_id),
        check_in=as_pacific_date(record.get("from")),
        check_out=as_pacific_date(record.get("to")),
        is_finalized=finalized is not False,
        action_id=record_id,
    )


def load_actions(path: str | Path, aliases: dict[str, str] | None = None) -> list[Action]:
    """Load booking history from a YAML (or JSON) list of records."""
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or []
    if isinstance(raw, dict):
        raw = raw.get("bookings", [])
    return [action_from_record(r, aliases) for r in raw]
