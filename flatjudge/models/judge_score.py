from sqlalchemy import UniqueConstraint
from flatjudge.extensions import db
from flatjudge.helpers.ids import generate_id
from flatjudge.helpers.time import utc_now, iso

class JudgeScore(db.Model):
    __tablename__ = "judge_scores"

    id = db.Column(db.String(64), primary_key=True, default=lambda: generate_id("score"))

    judge_id = db.Column(db.String(64), nullable=False, index=True)

    # Weak reference: deleting a rider leaves its scores in place
    rider_id = db.Column(db.String(64), nullable=False, index=True)

    # Raw rubric input: [{"item_id": "make_rate", "score": 4}, ...]
    scores = db.Column(db.JSON, nullable=False, default=list)

    # Weighted total against the schema in force at submission time.
    # Never recomputed when the schema is edited later.
    total_score = db.Column(db.Float, nullable=False, default=0.0)

    submitted_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    locked = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("judge_id", "rider_id", name="uq_judge_rider"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "judge_id": self.judge_id,
            "rider_id": self.rider_id,
            "scores": list(self.scores or []),
            "total_score": float(self.total_score or 0),
            "submitted_at": iso(self.submitted_at),
            "locked": bool(self.locked),
        }
