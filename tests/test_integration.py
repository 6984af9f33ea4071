"""Integration test — sample config and bookings through the scheduler and CLI."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from cabindraft.config import load_actions, load_config, parse_datetime
from cabindraft.constraints import validate_timeline
from cabindraft.draft import main
from cabindraft.models import DraftPhase, TurnStatus
from cabindraft.pricing import cost_for_action
from cabindraft.scheduler import compute_schedule, compute_timeline

ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT / "config.yaml"
BOOKINGS_PATH = ROOT / "bookings.yaml"


def _utc(month, day, hour, minute=0):
    return datetime(2026, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def season():
    config = load_config(CONFIG_PATH)
    actions = load_actions(BOOKINGS_PATH, config["name_aliases"])
    return config, actions


def _run(season, now):
    config, actions = season
    kwargs = dict(settings=config["settings"], aliases=config["name_aliases"])
    status = compute_schedule(config["participants"], actions, now, **kwargs)
    records = compute_timeline(config["participants"], actions, now, **kwargs)
    return status, records


class TestSampleSeason:
    def test_unfinalized_booking_keeps_turn_open(self, season):
        status, records = _run(season, parse_datetime("2026-03-05T12:00:00-08:00"))
        assert status.phase is DraftPhase.ROUND_1
        assert status.active_picker == "Lori and Jeff"
        assert status.next_picker == "Gayla and David"
        assert status.window_starts == _utc(3, 4, 18)
        assert status.window_ends == _utc(3, 6, 18)
        assert not status.is_grace_period

        assert [r.status for r in records[:4]] == [
            TurnStatus.COMPLETED, TurnStatus.PASSED, TurnStatus.CANCELLED, TurnStatus.ACTIVE,
        ]
        assert records[3].action_id == "b-004"

    def test_grace_after_timeout(self, season):
        status, records = _run(season, parse_datetime("2026-03-06T12:00:00-08:00"))
        assert status.active_picker == "Gayla and David"
        assert status.is_grace_period
        assert status.window_starts == _utc(3, 7, 18)
        assert records[3].status is TurnStatus.SKIPPED
        assert records[4].start == _utc(3, 6, 18)

    def test_timeline_is_valid(self, season):
        config, _ = season
        _, records = _run(season, parse_datetime("2026-03-05T12:00:00-08:00"))
        result = validate_timeline(records, config["participants"],
                                   aliases=config["name_aliases"])
        assert result["valid"], result["errors"]

    def test_booking_costs(self, season):
        _, actions = season
        assert cost_for_action(actions[0]).total == 650   # Mon-Mon, one full week
        assert cost_for_action(actions[1]).total == 0     # pass
        assert cost_for_action(actions[3]).total == 350   # Fri-Mon


class TestCli:
    def _argv(self, *extra):
        return ["--config", str(CONFIG_PATH), "--bookings", str(BOOKINGS_PATH), *extra]

    def test_status_json(self, capsys):
        main(["status", *self._argv("--now", "2026-03-05T12:00:00-08:00", "--json")])
        out = json.loads(capsys.readouterr().out)
        assert out["activePicker"] == "Lori and Jeff"
        assert out["phase"] == "ROUND_1"
        assert out["windowStarts"] == "2026-03-04T18:00:00+00:00"

    def test_status_text(self, capsys):
        main(["status", *self._argv("--now", "2026-03-06T12:00:00-08:00")])
        out = capsys.readouterr().out
        assert "2026 Trailer Season STATUS" in out
        assert "Gayla and David (grace period)" in out

    def test_timeline_json(self, capsys):
        main(["timeline", *self._argv("--now", "2026-03-05T12:00:00-08:00", "--json")])
        out = json.loads(capsys.readouterr().out)
        assert len(out) == 24
        assert out[0]["name"] == "Julia, Mandy and Bryan"
        assert out[-1]["name"] == "Julia, Mandy and Bryan"

    def test_validate(self, capsys):
        main(["validate", *self._argv("--now", "2026-03-05T12:00:00-08:00")])
        assert "RESULT: VALID" in capsys.readouterr().out

    def test_write_outputs(self, tmp_path, capsys):
        out_dir = tmp_path / "out"
        main(["timeline", *self._argv("--now", "2026-03-05T12:00:00-08:00",
                                      "-o", str(out_dir))])
        assert json.loads((out_dir / "status.json").read_text())["activePicker"] == "Lori and Jeff"
        assert len(json.loads((out_dir / "timeline.json").read_text())) == 24
        assert "SEASON TIMELINE" in (out_dir / "timeline.txt").read_text()

    def test_cost(self, capsys):
        main(["cost", "2026-03-02", "2026-03-09"])
        out = capsys.readouterr().out
        assert "7 nights: $650" in out
        assert "Weekly discount: 1 full week = -$100" in out

    def test_cost_needs_two_dates(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["cost", "2026-03-02"])
        assert exc.value.code == 1

    def test_missing_config(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["status", "--config", str(tmp_path / "nope.yaml")])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().out

    def test_bad_now(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["status", "--config", str(CONFIG_PATH), "--now", "whenever"])
        assert exc.value.code == 1
