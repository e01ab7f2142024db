"""Factory de engine/sessão do SQLAlchemy 2."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

def create_db_engine(database_url: str) -> Engine:
    """Cria engine síncrona. SQLite aceita uso a partir de outras threads (Flask)."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, future=True, connect_args=connect_args)

def create_session_factory(engine: Engine):
    """Cria SessionFactory síncrona para SQLAlchemy 2.

    :param engine: engine já criada (ver create_db_engine).
    :return: sessionmaker configurado.
    """
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)
