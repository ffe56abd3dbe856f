# run.py
import logging
import os

from resumegen_api.app import create_app, db
from resumegen_api.models import Template

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    try:
        app = create_app()
        with app.app_context():
            db.create_all()
            if Template.ensure_default():
                logger.info("Seeded default template")
        port = int(os.getenv("PORT", "4000"))
        logger.info(f"Starting Flask server on http://0.0.0.0:{port}")
        app.run(debug=False, host="0.0.0.0", port=port)
    except Exception as e:
        logger.exception(f"Error starting Flask app: {e}")
        raise
