from flatjudge.extensions import db
from flatjudge.helpers.ids import generate_id
from flatjudge.helpers.time import utc_now, iso

class Rider(db.Model):
    __tablename__ = "riders"

    id = db.Column(db.String(64), primary_key=True, default=lambda: generate_id("rider"))

    name = db.Column(db.String(120), nullable=False)

    # Stage / display name; falls back to `name` when blank
    rider_name = db.Column(db.String(120), nullable=True)

    # Running order on the day
    display_order = db.Column(db.Integer, nullable=False, default=0, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "rider_name": self.rider_name or self.name,
            "display_order": self.display_order or 0,
            "created_at": iso(self.created_at),
        }
