from deadstock.database.base import Base
from deadstock.database.engine import build_engine, engine
from deadstock.database.session import SessionLocal, session_factory_for

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "session_factory_for"]
