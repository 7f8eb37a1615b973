from dotenv import load_dotenv

load_dotenv()

from flatjudge import create_app
from flatjudge.extensions import db
from flatjudge.routes import register_blueprints
from flatjudge.helpers.gate import get_settings

api = create_app()

# Register all Blueprints (riders, judge, audience, admin, scores)
register_blueprints(api)

def init_db():
    """Ensure DB tables and the settings row exist."""
    db.create_all()
    get_settings()

# Run DB bootstrap once at startup
with api.app_context():
    init_db()

if __name__ == "__main__":
    api.run(debug=True)
