import os
import logging
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from admin_bootstrap import AdminStatus, DEFAULT_SERVICE_ACCOUNT_PATH, init_admin

# ----------------------
# Configuration
# ----------------------
load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
SERVICE_ACCOUNT_PATH = os.getenv("SERVICE_ACCOUNT_PATH", DEFAULT_SERVICE_ACCOUNT_PATH)
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "*")
ADMIN_USERS_PAGE_SIZE = 10

NOT_INITIALIZED_MESSAGE = "Firebase Admin not initialized."
STATUS_PAGE = "<h1>E-Learning Backend API is Running</h1><p>Status: Online</p>"

# Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("elearning-backend")


# ----------------------
# Helpers
# ----------------------
def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _cors_origins():
    origins = [o.strip() for o in FRONTEND_ORIGIN.split(",") if o.strip()]
    return origins or "*"


# ----------------------
# App Setup
# ----------------------
def create_app(admin: Optional[AdminStatus] = None) -> Flask:
    # Bootstrap runs before any route exists, so no request can see a half-set status.
    if admin is None:
        admin = init_admin(SERVICE_ACCOUNT_PATH)

    app = Flask(__name__)
    CORS(app, origins=_cors_origins())
    app.extensions["admin_status"] = admin

    # ----------------------
    # Endpoints
    # ----------------------
    @app.route("/", methods=["GET"])
    def status_page():
        return STATUS_PAGE, 200, {"Content-Type": "text/html; charset=utf-8"}

    @app.route("/api/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok", "timestamp": utc_timestamp()}), 200

    @app.route("/api/admin/users", methods=["GET"])
    def admin_users():
        if not admin.ready:
            return jsonify({"error": NOT_INITIALIZED_MESSAGE}), 503

        try:
            users = admin.client.list_users(ADMIN_USERS_PAGE_SIZE)
        except Exception as e:
            logger.exception("Failed to list users: %s", e)
            return jsonify({"error": str(e)}), 500
        return jsonify(users), 200

    # ----------------------
    # Errors
    # ----------------------
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    return app


def main():
    app = create_app()
    logger.info("Server is running on http://localhost:%s", PORT)
    app.run(host=HOST, port=PORT)


if __name__ == "__main__":
    main()
