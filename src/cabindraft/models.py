"""Data models for the cabin draft scheduler."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Optional


DEFAULT_DRAFT_START = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)  # midnight PST
FAST_PICK_DURATION = timedelta(minutes=10)


class ActionKind(Enum):
    BOOKING = "booking"
    PASS = "pass"
    AUTO_PASS = "auto-pass"
    CANCELLED = "cancelled"

    @classmethod
    def from_str(cls, s: Optional[str]) -> "ActionKind":
        """Parse a stored booking type. Missing or 'confirmed' means a booking."""
        if not s:
            return cls.BOOKING
        s = s.strip().lower().replace("_", "-")
        if s in ("confirmed", "booked"):
            return cls.BOOKING
        return cls(s)


class DraftPhase(Enum):
    PRE_DRAFT = "PRE_DRAFT"
    ROUND_1 = "ROUND_1"
    ROUND_2 = "ROUND_2"
    OPEN_SEASON = "OPEN_SEASON"

    @property
    def round_number(self) -> int:
        return {
            DraftPhase.PRE_DRAFT: 1,
            DraftPhase.ROUND_1: 1,
            DraftPhase.ROUND_2: 2,
            DraftPhase.OPEN_SEASON: 3,
        }[self]


class TurnStatus(Enum):
    COMPLETED = "COMPLETED"
    PASSED = "PASSED"
    CANCELLED = "CANCELLED"
    SKIPPED = "SKIPPED"
    ACTIVE = "ACTIVE"
    GRACE_PERIOD = "GRACE_PERIOD"
    FUTURE = "FUTURE"

    def is_current(self) -> bool:
        return self in (TurnStatus.ACTIVE, TurnStatus.GRACE_PERIOD)


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt is not None else None


@dataclass
class DraftSettings:
    """Timing rules for one season's draft."""
    draft_start: datetime = DEFAULT_DRAFT_START
    pick_duration_days: float = 2
    fast_testing_mode: bool = False
    bypass_ten_am: bool = False

    def __post_init__(self):
        if self.pick_duration_days <= 0:
            raise ValueError(
                f"pick_duration_days must be positive, got {self.pick_duration_days}"
            )

    @property
    def pick_duration(self) -> timedelta:
        if self.fast_testing_mode:
            return FAST_PICK_DURATION
        return timedelta(days=self.pick_duration_days)

    @property
    def snaps_to_ten_am(self) -> bool:
        return not (self.fast_testing_mode or self.bypass_ten_am)


@dataclass
class Action:
    """A booking, pass or cancellation recorded by a shareholder.

    Timestamps may be missing on older records. The instant that resolves a
    turn is taken, in order, from: cancelled_at (cancellations only),
    created_at, check_in. When none is usable the scheduler falls back to
    the expected window start.
    """
    shareholder: str
    kind: ActionKind = ActionKind.BOOKING
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    is_finalized: bool = True
    action_id: str = ""

    @property
    def resolves_turn(self) -> bool:
        # An unfinalized booking is still being edited; the turn stays open.
        if self.kind is ActionKind.BOOKING:
            return self.is_finalized
        return True

    def resolution_candidates(self) -> list:
        candidates = []
        if self.kind is ActionKind.CANCELLED and self.cancelled_at is not None:
            candidates.append(self.cancelled_at)
        candidates.append(self.created_at)
        candidates.append(self.check_in)
        return [c for c in candidates if c is not None]

    def to_dict(self) -> dict:
        return {
            "id": self.action_id,
            "shareholder": self.shareholder,
            "type": self.kind.value,
            "created_at": _iso(self.created_at),
            "cancelled_at": _iso(self.cancelled_at),
            "from": self.check_in.isoformat() if self.check_in else None,
            "to": self.check_out.isoformat() if self.check_out else None,
            "is_finalized": self.is_finalized,
        }


@dataclass
class DraftStatus:
    """Snapshot of the draft at one instant. Derived, safe to discard."""
    phase: DraftPhase
    active_picker: Optional[str]
    next_picker: Optional[str]
    window_starts: Optional[datetime]
    window_ends: Optional[datetime]
    draft_start: datetime
    official_start: datetime
    is_grace_period: bool = False
    is_season_start: bool = False

    @property
    def round(self) -> int:
        return self.phase.round_number

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "activePicker": self.active_picker,
            "nextPicker": self.next_picker,
            "round": self.round,
            "windowStarts": _iso(self.window_starts),
            "windowEnds": _iso(self.window_ends),
            "draftStart": _iso(self.draft_start),
            "officialStart": _iso(self.official_start),
            "isGracePeriod": self.is_grace_period,
            "isSeasonStart": self.is_season_start,
        }


@dataclass
class TurnRecord:
    """One turn in the season timeline."""
    index: int
    shareholder: str
    round: int
    status: TurnStatus
    start: datetime          # when the turn became available to act on
    official_start: datetime
    end: datetime            # resolution instant, or window deadline
    is_completed: bool = False
    action_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "name": self.shareholder,
            "round": self.round,
            "status": self.status.value,
            "start": _iso(self.start),
            "officialStart": _iso(self.official_start),
            "end": _iso(self.end),
            "isCompleted": self.is_completed,
            "bookingId": self.action_id,
        }


@dataclass
class CostBreakdown:
    weeknights: int
    weekends: int
    weeknight_total: int
    weekend_total: int
    discount: int
    full_weeks: int


@dataclass
class BookingCost:
    total: int
    nights: int
    average_rate: float
    breakdown: Optional[CostBreakdown] = None

    def to_dict(self) -> dict:
        out = {
            "total": self.total,
            "nights": self.nights,
            "averageRate": self.average_rate,
            "breakdown": None,
        }
        if self.breakdown is not None:
            b = self.breakdown
            out["breakdown"] = {
                "weeknights": b.weeknights,
                "weekends": b.weekends,
                "weeknightTotal": b.weeknight_total,
                "weekendTotal": b.weekend_total,
                "discount": b.discount,
                "fullWeeks": b.full_weeks,
            }
        return out
