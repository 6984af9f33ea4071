"""Draft scheduling engine.

Reconstructs the state of the snake draft from the booking history and the
current time. Nothing is stored between calls: the same participants,
actions and `now` always produce the same result, so a persisted status
can be thrown away and rebuilt at any time.

Turn walking:
1. Build the snake order (round 1 forward, round 2 reversed).
2. Start the cursor at the official start of the draft.
3. For each turn, match the participant's k-th action (by creation time)
   to their k-th turn.
4. A resolving action moves the cursor to the official start after the
   action. A turn without one is timed out once `now` passes its window
   limit (cursor + pick duration), otherwise it is the current turn.
"""

import logging
from datetime import datetime, timezone

from cabindraft.models import (
    Action, ActionKind, DraftPhase, DraftSettings, DraftStatus, TurnRecord,
    TurnStatus,
)
from cabindraft.names import normalize_name
from cabindraft.timing import as_instant, official_start
from cabindraft.turn_order import round_for_turn, snake_order

logger = logging.getLogger(__name__)


class ScheduleInputError(ValueError):
    """Participant list the scheduler cannot walk (empty or duplicated)."""


def _check_participants(participants: list[str],
                        aliases: dict[str, str] | None) -> None:
    if not participants:
        raise ScheduleInputError("At least one participant is required")
    seen: dict[str, str] = {}
    for p in participants:
        key = normalize_name(p, aliases)
        if not key:
            raise ScheduleInputError(f"Blank participant name: {p!r}")
        if key in seen:
            raise ScheduleInputError(
                f"Participants {seen[key]!r} and {p!r} are the same shareholder"
            )
        seen[key] = p


def _creation_sort_key(action: Action):
    created = as_instant(action.created_at)
    if created is None:
        return (1, 0.0)
    return (0, created.timestamp())


def group_actions(participants: list[str], actions: list[Action],
                  aliases: dict[str, str] | None = None) -> dict[str, list[Action]]:
    """Each participant's actions, oldest first. Cancelled ones included.

    Actions for names that match no participant are dropped.
    """
    by_key: dict[str, list[Action]] = {normalize_name(p, aliases): [] for p in participants}
    for action in actions:
        key = normalize_name(action.shareholder, aliases)
        if key in by_key:
            by_key[key].append(action)
        else:
            logger.debug("Ignoring action for unknown shareholder %r", action.shareholder)
    return {
        p: sorted(by_key[normalize_name(p, aliases)], key=_creation_sort_key)
        for p in participants
    }


def _resolution_instant(action: Action, cursor: datetime) -> datetime:
    for candidate in action.resolution_candidates():
        instant = as_instant(candidate)
        if instant is not None:
            return instant
    logger.debug(
        "No usable timestamp on action %r for %s; resolving at %s",
        action.action_id, action.shareholder, cursor.isoformat(),
    )
    return cursor


def _resolved_status(action: Action) -> TurnStatus:
    if action.kind is ActionKind.CANCELLED:
        return TurnStatus.CANCELLED
    if action.kind in (ActionKind.PASS, ActionKind.AUTO_PASS):
        return TurnStatus.PASSED
    return TurnStatus.COMPLETED


def _walk_turns(participants: list[str], actions: list[Action], now: datetime,
                settings: DraftSettings, draft_start: datetime,
                aliases: dict[str, str] | None):
    """Yield a TurnRecord for every turn in the snake order, in order."""
    if settings.snaps_to_ten_am:
        anchor = official_start
    else:
        anchor = as_instant
    duration = settings.pick_duration
    n = len(participants)

    turn_order = snake_order(participants)
    user_actions = group_actions(participants, actions, aliases)
    turns_consumed: dict[str, int] = {p: 0 for p in participants}

    cursor = anchor(draft_start)
    last_completion: datetime | None = None
    found_current = False

    for i, name in enumerate(turn_order):
        k = turns_consumed[name]
        turns_consumed[name] += 1
        history = user_actions[name]
        action = history[k] if k < len(history) else None
        window_start = cursor
        round_number = round_for_turn(i, n)
        action_id = action.action_id if action is not None else None

        if action is not None and action.resolves_turn:
            resolved_at = _resolution_instant(action, cursor)
            cursor = anchor(resolved_at)
            last_completion = resolved_at
            yield TurnRecord(
                index=i, shareholder=name, round=round_number,
                status=_resolved_status(action), start=window_start,
                official_start=window_start, end=resolved_at,
                is_completed=True, action_id=action_id,
            )
            continue

        window_limit = window_start + duration
        cursor = anchor(window_limit)

        if found_current:
            status = TurnStatus.FUTURE
            start = window_start
        elif now > window_limit:
            logger.debug("Turn %d (%s) timed out at %s", i + 1, name, window_limit.isoformat())
            status = TurnStatus.SKIPPED
            start = window_start
            last_completion = window_limit
        else:
            found_current = True
            # The season's first picker has early access; no grace period.
            if i == 0 or now >= window_start:
                status = TurnStatus.ACTIVE
            else:
                status = TurnStatus.GRACE_PERIOD
            start = last_completion or window_start

        yield TurnRecord(
            index=i, shareholder=name, round=round_number, status=status,
            start=start, official_start=window_start, end=window_limit,
            is_completed=False, action_id=action_id,
        )


def _prepare(participants, now, start_override, settings, aliases):
    _check_participants(participants, aliases)
    settings = settings or DraftSettings()
    now_instant = as_instant(now)
    if now_instant is None:
        raise ValueError(f"now must be a timestamp, got {now!r}")
    draft_start = as_instant(start_override) or as_instant(settings.draft_start)
    return settings, now_instant, draft_start


def compute_schedule(participants: list[str], actions: list[Action],
                     now: datetime, start_override: datetime | None = None,
                     settings: DraftSettings | None = None,
                     aliases: dict[str, str] | None = None) -> DraftStatus:
    """Compute the draft status at `now`.

    Walks turns until the first one that is neither resolved nor timed out;
    that turn is the active one. Raises ScheduleInputError for an empty or
    duplicated participant list. Bad timestamps on actions never raise.

    An unfinalized booking does not resolve its turn, even though it sits at
    the turn's position: the turn stays open until the booking is finalized
    or the window lapses. Keep this in step with Action.resolves_turn.
    """
    settings, now, draft_start = _prepare(
        participants, now, start_override, settings, aliases)
    turn_order = snake_order(participants)

    current: TurnRecord | None = None
    last: TurnRecord | None = None
    for record in _walk_turns(participants, actions, now, settings, draft_start, aliases):
        last = record
        if record.status.is_current():
            current = record
            break

    if current is not None:
        i = current.index
        return DraftStatus(
            phase=DraftPhase.ROUND_1 if current.round == 1 else DraftPhase.ROUND_2,
            active_picker=current.shareholder,
            next_picker=turn_order[i + 1] if i + 1 < len(turn_order) else None,
            window_starts=current.official_start,
            window_ends=current.end,
            draft_start=draft_start,
            official_start=current.official_start,
            is_grace_period=current.status is TurnStatus.GRACE_PERIOD,
            is_season_start=(i == 0),
        )

    anchor = official_start if settings.snaps_to_ten_am else as_instant
    phase = DraftPhase.OPEN_SEASON if now >= draft_start else DraftPhase.PRE_DRAFT
    return DraftStatus(
        phase=phase,
        active_picker=None,
        next_picker=None,
        window_starts=None,
        window_ends=None,
        draft_start=draft_start,
        official_start=anchor(last.end),
    )


def compute_timeline(participants: list[str], actions: list[Action],
                     now: datetime, start_override: datetime | None = None,
                     settings: DraftSettings | None = None,
                     aliases: dict[str, str] | None = None) -> list[TurnRecord]:
    """Every turn of the season with its status at `now`.

    Turns after the current one are projected with full-length windows.
    At most one turn is ACTIVE or GRACE_PERIOD, and it is the same turn
    compute_schedule reports for the same inputs.
    """
    settings, now, draft_start = _prepare(
        participants, now, start_override, settings, aliases)
    return list(_walk_turns(participants, actions, now, settings, draft_start, aliases))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
