from flatjudge.extensions import db
from flatjudge.helpers.time import utc_now, iso

SETTINGS_ID = "default"

class ContestSettings(db.Model):
    """
    Single-row contest configuration (id is always SETTINGS_ID).

    Holds the judge rubric, the audience vote range/weight and the voting
    gate (voting_enabled + current_rider_id). Updates are read-modify-write
    with last-writer-wins semantics; a single admin operator is assumed.
    """
    __tablename__ = "contest_settings"

    id = db.Column(db.String(32), primary_key=True, default=SETTINGS_ID)

    # List of evaluation item dicts (see helpers.schema.EvaluationItem)
    evaluation_items = db.Column(db.JSON, nullable=False, default=list)

    audience_weight = db.Column(db.Float, nullable=False, default=2.0)
    audience_min_score = db.Column(db.Integer, nullable=False, default=1)
    audience_max_score = db.Column(db.Integer, nullable=False, default=5)

    # --- voting gate ---
    voting_enabled = db.Column(db.Boolean, nullable=False, default=False)
    current_rider_id = db.Column(db.String(64), nullable=True)
    voting_started_at = db.Column(db.DateTime, nullable=True)

    # Advisory countdown shown to the audience
    voting_deadline_seconds = db.Column(db.Integer, nullable=False, default=30)

    allow_vote_modification = db.Column(db.Boolean, nullable=False, default=True)
    modification_window_seconds = db.Column(db.Integer, nullable=False, default=10)

    contest_name = db.Column(db.String(160), nullable=False, default="")
    contest_date = db.Column(db.String(10), nullable=True)  # YYYY-MM-DD

    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self):
        return {
            "id": self.id,
            "evaluation_items": list(self.evaluation_items or []),
            "audience_weight": float(self.audience_weight),
            "audience_min_score": self.audience_min_score,
            "audience_max_score": self.audience_max_score,
            "voting_enabled": bool(self.voting_enabled),
            "current_rider_id": self.current_rider_id,
            "voting_started_at": iso(self.voting_started_at),
            "voting_deadline_seconds": self.voting_deadline_seconds,
            "allow_vote_modification": bool(self.allow_vote_modification),
            "modification_window_seconds": self.modification_window_seconds,
            "contest_name": self.contest_name,
            "contest_date": self.contest_date,
            "updated_at": iso(self.updated_at),
        }
