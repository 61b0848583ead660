from sqlalchemy.orm import sessionmaker

from deadstock.database.engine import engine

# Session rows are read back after commit by the session store.
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def session_factory_for(bind):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)
