from flatjudge.extensions import db
from flatjudge.helpers.time import utc_now, iso

LOG_TYPES = ("judge_score", "audience_vote", "setting_change", "voting_control")

class LogEntry(db.Model):
    __tablename__ = "logs"

    id = db.Column(db.Integer, primary_key=True)

    type = db.Column(db.String(32), nullable=False, index=True)
    action = db.Column(db.String(160), nullable=False)
    data = db.Column(db.JSON, nullable=False, default=dict)

    timestamp = db.Column(db.DateTime, nullable=False, default=utc_now, index=True)

    user_id = db.Column(db.String(64), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "action": self.action,
            "data": self.data or {},
            "timestamp": iso(self.timestamp),
            "user_id": self.user_id,
        }
