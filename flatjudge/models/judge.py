from flatjudge.extensions import db
from flatjudge.helpers.ids import generate_id
from flatjudge.helpers.time import utc_now

class Judge(db.Model):
    __tablename__ = "judges"

    id = db.Column(db.String(64), primary_key=True, default=lambda: generate_id("judge"))
    name = db.Column(db.String(120), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "is_active": bool(self.is_active)}
