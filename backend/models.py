from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


def new_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Prenotazione(Base):
    """
    Prenotazione di una sala riunioni.

    Gli orari sono salvati come datetime UTC naive: la conversione da/verso
    ISO-8601 con offset avviene nei services.
    """
    __tablename__ = "prenotazioni"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    sala: Mapped[str] = mapped_column(String(80), nullable=False, index=True)

    data_ora: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    data_ora_fine: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    utente: Mapped[str] = mapped_column(String(120), nullable=False)
    fornitore: Mapped[str] = mapped_column(String(120), nullable=False)
    # le righe delle prime versioni non hanno il numero di persone
    numero_persone: Mapped[int | None] = mapped_column(Integer, nullable=True)

    creata_il: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"Prenotazione({self.sala}, {self.data_ora:%Y-%m-%d %H:%M}, {self.utente})"
