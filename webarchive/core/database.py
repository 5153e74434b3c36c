import logging
from datetime import datetime
from typing import Any, Dict, NamedTuple, Sequence

from sqlalchemy import DateTime, bindparam, create_engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from webarchive.core.config import settings
from webarchive.core.errors import ConflictError, StoreError

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

# sqlite (tests) : la connexion est partagée entre les threads du TestClient
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """Dépendance sessionDB"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class Statement(NamedTuple):
    """Une requête SQL paramétrée, exécutée plus tard dans un batch"""

    sql: str
    params: Dict[str, Any]

    def as_clause(self):
        clause = text(self.sql)
        # typer les datetimes pour que chaque dialecte stocke le même format
        typed = [bindparam(name, type_=DateTime()) for name, value in self.params.items() if isinstance(value, datetime)]
        if typed:
            clause = clause.bindparams(*typed)
        return clause


# SQLSTATE postgres pour une violation d'unicité
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """Distingue un doublon (conflit) d'une autre contrainte (FK, NOT NULL...)"""
    sqlstate = getattr(error.orig, "sqlstate", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION
    # sqlite : pas de code, seulement le message
    message = str(error.orig)
    return "UNIQUE constraint failed" in message or "PRIMARY KEY" in message


def run_batch(db: Session, statements: Sequence[Statement]) -> bool:
    """
    Exécute les requêtes dans l'ordre, en tout-ou-rien.

    Une seule transaction pour toute la liste : commit à la fin, et la première
    requête qui échoue annule tout ce qui a été exécuté avant. Pas de retry.
    """
    if not statements:
        return True

    try:
        for statement in statements:
            db.execute(statement.as_clause(), statement.params)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            logger.warning(f"Batch of {len(statements)} statements hit a unique constraint, rolled back")
            raise ConflictError("Unique constraint violated") from e
        logger.error(f"Batch of {len(statements)} statements broke a constraint, rolled back: {e}")
        raise StoreError("Constraint violated") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Batch of {len(statements)} statements failed, rolled back: {e}")
        raise StoreError("Batch execution failed") from e

    return True
