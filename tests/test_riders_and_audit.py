"""Tests for rider/judge CRUD and the bounded audit trail."""

import pytest

from flatjudge.models import JudgeScore, LogEntry
from flatjudge.helpers.audit import add_log, get_logs
from flatjudge.helpers.errors import ValidationError, NotFound
from flatjudge.helpers.judges import create_judge, get_judges, delete_judge
from flatjudge.helpers.ledger import submit_judge_score
from flatjudge.helpers.riders import create_rider, update_rider, delete_rider, get_riders

from tests.conftest import sheet


class TestRiders:
    """Rider registry."""

    def test_display_order_defaults_to_next(self, app):
        a = create_rider("A")
        b = create_rider("B")
        c = create_rider("C", display_order=10)
        d = create_rider("D")

        assert (a.display_order, b.display_order, c.display_order, d.display_order) == (1, 2, 10, 11)

    def test_rider_name_falls_back_to_name(self, app):
        assert create_rider("Taro").to_dict()["rider_name"] == "Taro"

    def test_listed_in_running_order(self, app):
        create_rider("Second", display_order=2)
        create_rider("First", display_order=1)
        assert [r.name for r in get_riders()] == ["First", "Second"]

    def test_update(self, rider):
        update_rider(rider.id, {"rider_name": "T-BONE", "display_order": 7})
        assert rider.rider_name == "T-BONE"
        assert rider.display_order == 7

    def test_update_validates_before_writing(self, rider):
        with pytest.raises(ValidationError):
            update_rider(rider.id, {"name": "New", "display_order": "soon"})
        assert rider.name == "Taro Yamada"

    def test_missing_name(self, app):
        with pytest.raises(ValidationError):
            create_rider("   ")

    def test_unknown_rider(self, app):
        with pytest.raises(NotFound):
            update_rider("rider_missing", {"name": "x"})
        with pytest.raises(NotFound):
            delete_rider("rider_missing")

    def test_delete_leaves_scores(self, judge, rider):
        submit_judge_score(judge.id, rider.id, sheet(4))
        delete_rider(rider.id)

        assert get_riders() == []
        assert JudgeScore.query.filter_by(rider_id=rider.id).count() == 1


class TestJudges:
    """Judge registry."""

    def test_create_and_list(self, app):
        create_judge("Judge A")
        create_judge("Judge B", is_active=False)
        assert [(j.name, j.is_active) for j in get_judges()] == [("Judge A", True), ("Judge B", False)]

    def test_delete_keeps_scores(self, judge, rider):
        submit_judge_score(judge.id, rider.id, sheet(2))
        delete_judge(judge.id)
        assert JudgeScore.query.count() == 1


class TestAuditTrail:
    """Capped, newest-first log."""

    def test_newest_first(self, app):
        create_rider("A")
        create_rider("B")

        logs = get_logs()
        assert [e.data["rider"]["name"] for e in logs] == ["B", "A"]

    def test_pruned_to_limit(self, app):
        app.config["LOG_LIMIT"] = 5
        for n in range(8):
            create_rider(f"Rider {n}")

        assert LogEntry.query.count() == 5
        assert [e.data["rider"]["name"] for e in get_logs()] == [f"Rider {n}" for n in (7, 6, 5, 4, 3)]

    def test_filter_by_type(self, voting_open):
        assert {e.type for e in get_logs("voting_control")} == {"voting_control"}

    def test_unknown_type(self, app):
        with pytest.raises(ValueError):
            add_log("nonsense", "x")
