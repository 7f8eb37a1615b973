"""Tests for the voting gate and the settings singleton."""

from datetime import timedelta

import pytest

from flatjudge.models import ContestSettings, LogEntry
from flatjudge.extensions import db
from flatjudge.helpers.errors import ValidationError, NotFound, StorageFailure
from flatjudge.helpers.gate import (
    get_settings,
    update_settings,
    set_voting_enabled,
    start_voting,
    stop_voting,
    select_rider,
    voting_state,
    max_judge_score_for,
)

from tests.conftest import T0


class TestSettingsSingleton:
    """Settings row lifecycle."""

    def test_created_once_with_defaults(self, app):
        first = get_settings()
        second = get_settings()

        assert first.id == second.id == "default"
        assert ContestSettings.query.count() == 1
        assert first.voting_enabled is False
        assert first.current_rider_id is None
        assert first.audience_min_score == 1
        assert first.audience_max_score == 5
        assert first.audience_weight == 2
        assert first.allow_vote_modification is True
        assert first.modification_window_seconds == 10

    def test_default_rubric_max_is_100(self, app):
        assert max_judge_score_for() == 100

    def test_partial_update(self, app):
        update_settings({"audience_weight": 3, "contest_name": "Spring Jam"})
        settings = get_settings()

        assert settings.audience_weight == 3
        assert settings.contest_name == "Spring Jam"
        # untouched fields keep their values
        assert settings.audience_max_score == 5

    def test_update_logged(self, app):
        update_settings({"audience_weight": 3})
        entry = LogEntry.query.filter_by(type="setting_change").one()
        assert entry.data["updates"] == {"audience_weight": 3.0}

    def test_unknown_field_rejected_without_side_effect(self, app):
        with pytest.raises(ValidationError):
            update_settings({"audience_weight": 4, "bogus": True})
        assert get_settings().audience_weight == 2

    def test_min_above_max_rejected(self, app):
        with pytest.raises(ValidationError):
            update_settings({"audience_min_score": 6})

    def test_bad_rubric_rejected(self, app):
        with pytest.raises(ValidationError):
            update_settings({"evaluation_items": [{"id": "a", "name": "A", "weight": -2}]})
        assert len(get_settings().evaluation_items) == 6

    def test_rubric_edit_changes_max(self, app):
        items = get_settings().evaluation_items
        items = [dict(i, enabled=(i["id"] != "make_rate")) for i in items]
        update_settings({"evaluation_items": items})

        assert max_judge_score_for() == 75


class TestVotingGate:
    """Open / close / select rider transitions."""

    def test_start_with_rider(self, rider):
        settings = start_voting(rider.id, now=T0)

        assert settings.voting_enabled is True
        assert settings.current_rider_id == rider.id
        assert settings.voting_started_at == T0

    def test_start_is_idempotent_for_same_rider(self, rider):
        start_voting(rider.id, now=T0)
        logs_before = LogEntry.query.count()

        settings = start_voting(rider.id, now=T0 + timedelta(seconds=20))

        assert settings.voting_started_at == T0
        assert LogEntry.query.count() == logs_before

    def test_stop_keeps_rider(self, voting_open, rider):
        settings = stop_voting()

        assert settings.voting_enabled is False
        assert settings.current_rider_id == rider.id

    def test_set_voting_without_rider_keeps_selection(self, rider):
        select_rider(rider.id)
        settings = set_voting_enabled(True, now=T0)

        assert settings.voting_enabled is True
        assert settings.current_rider_id == rider.id

    def test_explicit_none_clears_rider(self, voting_open):
        settings = set_voting_enabled(False, None)
        assert settings.current_rider_id is None

    def test_select_rider_while_open(self, voting_open, other_rider):
        settings = select_rider(other_rider.id)

        assert settings.voting_enabled is True
        assert settings.current_rider_id == other_rider.id

    def test_select_none(self, voting_open):
        assert select_rider(None).current_rider_id is None

    def test_unknown_rider_rejected(self, app):
        with pytest.raises(NotFound):
            start_voting("rider_missing")
        assert get_settings().voting_enabled is False

    def test_enabled_must_be_bool(self, app):
        with pytest.raises(ValidationError):
            set_voting_enabled("yes")

    def test_voting_control_logged(self, voting_open):
        stop_voting()
        actions = [e.action for e in LogEntry.query.filter_by(type="voting_control").order_by(LogEntry.id)]
        assert actions == ["Voting started", "Voting stopped"]

    def test_update_settings_opening_sets_start_time(self, rider):
        update_settings({"voting_enabled": True, "current_rider_id": rider.id}, now=T0)
        assert get_settings().voting_started_at == T0


class TestVotingState:
    """Advisory countdown."""

    def test_remaining_seconds(self, voting_open):
        state = voting_state(now=T0 + timedelta(seconds=10))

        assert state["is_open"] is True
        assert state["remaining_seconds"] == 20
        assert state["deadline_timestamp"].startswith("2026-05-01T12:00:30")

    def test_never_negative(self, voting_open):
        assert voting_state(now=T0 + timedelta(minutes=5))["remaining_seconds"] == 0

    def test_closed(self, app):
        state = voting_state()
        assert state == {
            "is_open": False,
            "current_rider_id": None,
            "deadline_timestamp": None,
            "remaining_seconds": 0,
        }

    def test_switching_rider_restarts_countdown(self, voting_open, other_rider):
        later = T0 + timedelta(minutes=3)
        settings = start_voting(other_rider.id, now=later)

        assert settings.current_rider_id == other_rider.id
        assert settings.voting_started_at == later
        assert voting_state(now=later)["remaining_seconds"] == 30

    def test_selecting_rider_while_open_restarts_countdown(self, voting_open, other_rider):
        later = T0 + timedelta(minutes=3)
        select_rider(other_rider.id, now=later)

        state = voting_state(now=later)
        assert state["current_rider_id"] == other_rider.id
        assert state["remaining_seconds"] == 30

    def test_settings_rider_switch_restarts_countdown(self, voting_open, other_rider):
        later = T0 + timedelta(minutes=3)
        update_settings({"current_rider_id": other_rider.id}, now=later)

        assert get_settings().voting_started_at == later
        assert voting_state(now=later)["remaining_seconds"] == 30

    def test_reselecting_same_rider_keeps_countdown(self, voting_open, rider):
        select_rider(rider.id, now=T0 + timedelta(seconds=20))
        assert get_settings().voting_started_at == T0

    def test_selecting_while_closed_does_not_start_countdown(self, rider):
        select_rider(rider.id, now=T0)
        assert get_settings().voting_started_at is None


class TestSettingsStorage:
    """Bootstrapping the settings row goes through the same failure mapping as writes."""

    def test_recreated_after_delete(self, app):
        db.session.delete(get_settings())
        db.session.commit()

        assert get_settings().id == "default"
        assert ContestSettings.query.count() == 1

    def test_bootstrap_commit_failure(self, app, commit_fails):
        db.session.delete(db.session.get(ContestSettings, "default"))
        db.session.flush()

        with pytest.raises(StorageFailure):
            get_settings()
