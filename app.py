import atexit
import logging
import sys

import click
from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from utils.db import init_db_connection, close_db_connection
from utils.errors import AttendanceError
from utils.mark_attendance import reset_attendance
from utils.scheduler import AttendanceScheduler, DailyResetJob

# Import controllers
from controllers.attendance_controller import attendance_bp
from controllers.report_controller import report_bp


def setup_logging(app):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    ))
    level = app.config.get("LOG_LEVEL", "INFO")

    # Module loggers (utils.*, controllers.*) share the app handler
    for logger in (app.logger, logging.getLogger("utils"), logging.getLogger("controllers")):
        logger.handlers = [handler]
        logger.setLevel(level)


def register_error_handlers(app):
    @app.errorhandler(AttendanceError)
    def handle_attendance_error(e):
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        app.logger.error(f"Unhandled error on {request.method} {request.path}: {e}", exc_info=True)
        return jsonify({"error": "Server error"}), 500


def register_commands(app):
    @app.cli.command("reset-attendance")
    def reset_attendance_command():
        """Delete every attendance record not dated today."""
        deleted = reset_attendance()
        click.echo(f"Removed {deleted} stale attendance records.")


def init_scheduler(app):
    scheduler = AttendanceScheduler(app)
    scheduler.add_job(DailyResetJob(app.config["RESET_CRON"]))
    app.extensions["attendance_scheduler"] = scheduler
    if app.config["SCHEDULER_ENABLED"]:
        scheduler.start()
        atexit.register(scheduler.shutdown)
    return scheduler


def create_app(config=Config, mongo_client=None):
    app = Flask(__name__)               # Initialize Flask app
    app.config.from_object(config)      # Load configuration from Config class
    config.validate()

    setup_logging(app)
    app.logger.info("Starting attendance service...")

    CORS(app, resources={r"/*": {"origins": "*"}})

    init_db_connection(app, client=mongo_client)    # Initialize MongoDB connection
    atexit.register(close_db_connection)

    # Register Blueprint
    app.register_blueprint(attendance_bp)
    app.register_blueprint(report_bp)

    register_error_handlers(app)
    register_commands(app)
    init_scheduler(app)

    return app


# Run the app
if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=app.config["PORT"])
