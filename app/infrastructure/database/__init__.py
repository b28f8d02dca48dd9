from app.infrastructure.database.session import AsyncSessionLocal, Base, get_db, ping_database

__all__ = ["AsyncSessionLocal", "Base", "get_db", "ping_database"]
