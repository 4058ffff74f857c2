import os
from threading import Lock
from typing import Any

from pymongo import MongoClient
from pymongo.database import Database

from ..utilities.setup_error import SetupError

# Module-level cache for the database instance
_mongo_db: Database | Any | None = None
_lock = Lock()

def get_database() -> Database:
    """ Returns the database Documents are stored in, creating it from the environment on first use. """
    global _mongo_db
    if _mongo_db is not None:
        return _mongo_db
    with _lock:
        if _mongo_db is None:
            _mongo_db = create_mongo_db()
    return _mongo_db

def create_mongo_db() -> Database:
    MONGO_URL = os.environ.get("MONGO_URL")
    if not MONGO_URL: raise SetupError("Please set MONGO_URL in your environment variables.")

    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME")
    if not MONGO_DB_NAME: raise SetupError("Please set MONGO_DB_NAME in your environment variables.")

    # Initialize database
    mongo_client = MongoClient(MONGO_URL)
    return mongo_client[MONGO_DB_NAME]

def configure_database(database: Database | Any) -> None:
    """ Use an already created database instead of reading the environment. Anything indexable by collection name works. """
    global _mongo_db
    with _lock:
        _mongo_db = database

def reset_database() -> None:
    global _mongo_db
    with _lock:
        _mongo_db = None
