"""Initialize the database and search index - creates all tables and syncs missing columns."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import engine, Base
import app.models  # noqa: F401 - registers all models
from app.services.search_service import SearchService
from app.utils.schema_sync import sync_missing_schema_objects


def init_db():
    print("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    applied = sync_missing_schema_objects(engine, Base.metadata)
    print(f"Schema sync applied {len(applied)} change(s).")
    if SearchService().initialize_index():
        print("Search index configured.")
    else:
        print("Search index skipped (disabled or unreachable).")
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db()
