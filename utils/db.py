"""
utils/db.py
-----------------
This module initializes and manages the MongoDB connection
for the entire Flask application.
"""

import logging

from flask import current_app
from flask_pymongo import PyMongo
from pymongo import ASCENDING

logger = logging.getLogger(__name__)

# Create a global MongoDB instance
mongo = PyMongo()


def init_db_connection(app, client=None):
    """
    Initialize MongoDB connection with Flask app.
    Loads settings from config.py (like MONGO_URI). An already built
    client (e.g. a mongomock client) can be passed in instead.
    """
    if client is None:
        mongo.init_app(app)
    else:
        mongo.cx = client
        mongo.db = client.get_default_database(default="AttendanceSystem")

    with app.app_context():
        ensure_indexes()

    logger.info("MongoDB connection initialized successfully.")
    return mongo


def close_db_connection():
    if mongo.cx is not None:
        mongo.cx.close()
        logger.info("MongoDB connection closed.")


def ensure_indexes():
    # Backstop for the read-then-write duplicate check
    attendance_col().create_index(
        [("name", ASCENDING), ("date", ASCENDING)],
        unique=True,
        name="name_date_unique",
    )


# Collections (shortcuts)
def attendance_col():
    return mongo.db[current_app.config["ATTENDANCE_COLLECTION"]]
