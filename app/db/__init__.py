"""
Database module - PostgreSQL connection and query helpers.
"""
from app.db.postgres import get_db_session, test_postgres_connection
from app.db.query_builder import Predicates

__all__ = [
    "get_db_session",
    "test_postgres_connection",
    "Predicates",
]
