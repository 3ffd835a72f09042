from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)

engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


@contextmanager
def db_session() -> Iterator[Session]:
    """
    Una transazione per blocco `with`: commit all'uscita, rollback se il
    blocco solleva. Le righe restano leggibili dopo la chiusura
    (expire_on_commit=False), così i services possono serializzarle.
    """
    session: Session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        logger.debug("Rollback transazione prenotazioni", exc_info=True)
        session.rollback()
        raise
    finally:
        session.close()
