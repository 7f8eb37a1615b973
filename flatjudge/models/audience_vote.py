from sqlalchemy import UniqueConstraint
from flatjudge.extensions import db
from flatjudge.helpers.ids import generate_id
from flatjudge.helpers.time import utc_now, iso

class AudienceVote(db.Model):
    __tablename__ = "audience_votes"

    id = db.Column(db.String(64), primary_key=True, default=lambda: generate_id("vote"))

    # Weak reference, same as JudgeScore.rider_id
    rider_id = db.Column(db.String(64), nullable=False, index=True)

    # Best-effort browser fingerprint
    device_id = db.Column(db.String(255), nullable=False, index=True)

    score = db.Column(db.Integer, nullable=False)

    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)

    timestamp = db.Column(db.DateTime, nullable=False, default=utc_now)

    # NULL = final as soon as it was cast
    can_modify_until = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("device_id", "rider_id", name="uq_device_rider"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "rider_id": self.rider_id,
            "score": self.score,
            "device_id": self.device_id,
            "ip": self.ip,
            "user_agent": self.user_agent,
            "timestamp": iso(self.timestamp),
            "can_modify_until": iso(self.can_modify_until),
        }
