from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select

from .db import Base, db_session, engine
from .models import Prenotazione
from .orari import a_utc, iso_utc
from .realtime import DELETE, INSERT, UPDATE, NotificaModifica, feed

logger = logging.getLogger(__name__)

# campi modificabili con un aggiornamento parziale (la sala resta quella di creazione)
CAMPI_AGGIORNABILI = ("data_ora", "data_ora_fine", "utente", "fornitore", "numero_persone")


# =========================
# Bootstrap DB
# =========================
def init_db() -> None:
    """Crea le tabelle se non esistono."""
    Base.metadata.create_all(bind=engine)


# =========================
# Helper
# =========================
def prenotazione_to_row(p: Prenotazione) -> dict[str, Any]:
    """Riga 'flat' serializzabile: è anche il payload delle notifiche realtime."""
    return {
        "id": p.id,
        "sala": p.sala,
        "data_ora": iso_utc(p.data_ora),
        "data_ora_fine": iso_utc(p.data_ora_fine),
        "utente": p.utente,
        "fornitore": p.fornitore,
        "numero_persone": p.numero_persone,
        "creata_il": iso_utc(p.creata_il),
    }


def _testo_obbligatorio(valore: str | None, campo: str) -> str:
    valore = (valore or "").strip()
    if not valore:
        raise ValueError(f"Il campo '{campo}' è obbligatorio.")
    return valore


def _persone(valore: int | None) -> int | None:
    if valore is None:
        return None
    if isinstance(valore, bool) or int(valore) != valore or valore < 1:
        raise ValueError("Il numero di persone deve essere un intero positivo.")
    return int(valore)


# =========================
# Query
# =========================
def lista_prenotazioni_flat(sala: str) -> list[dict]:
    """Prenotazioni di una sala, in ordine crescente di inizio."""
    with db_session() as s:
        q = select(Prenotazione).where(Prenotazione.sala == sala).order_by(Prenotazione.data_ora.asc())
        return [prenotazione_to_row(p) for p in s.scalars(q)]


def get_prenotazione_flat(prenotazione_id: str) -> dict | None:
    with db_session() as s:
        p = s.get(Prenotazione, prenotazione_id)
        return prenotazione_to_row(p) if p else None


# =========================
# CRUD (ogni modifica genera una notifica realtime dopo il commit)
# =========================
def crea_prenotazione(
    sala: str,
    utente: str,
    fornitore: str,
    data_ora: datetime | str,
    data_ora_fine: datetime | str | None = None,
    numero_persone: int | None = None,
) -> dict:
    p = Prenotazione(
        sala=_testo_obbligatorio(sala, "sala"),
        utente=_testo_obbligatorio(utente, "utente"),
        fornitore=_testo_obbligatorio(fornitore, "fornitore"),
        data_ora=a_utc(data_ora),
        data_ora_fine=a_utc(data_ora_fine) if data_ora_fine else None,
        numero_persone=_persone(numero_persone),
    )
    with db_session() as s:
        s.add(p)
        s.flush()
        row = prenotazione_to_row(p)

    logger.info("Prenotazione %s creata in %s", row["id"], row["sala"])
    feed.pubblica(NotificaModifica(INSERT, new=row))
    return row


def aggiorna_prenotazione(prenotazione_id: str, campi: dict[str, Any]) -> dict | None:
    """
    Aggiornamento parziale: i campi assenti restano invariati.
    Ritorna None se la prenotazione non esiste.
    """
    if "sala" in campi:
        raise ValueError("La sala di una prenotazione non è modificabile.")
    sconosciuti = set(campi) - set(CAMPI_AGGIORNABILI)
    if sconosciuti:
        raise ValueError(f"Campi non aggiornabili: {', '.join(sorted(sconosciuti))}")

    with db_session() as s:
        p = s.get(Prenotazione, prenotazione_id)
        if not p:
            return None

        old = prenotazione_to_row(p)

        if "utente" in campi:
            p.utente = _testo_obbligatorio(campi["utente"], "utente")
        if "fornitore" in campi:
            p.fornitore = _testo_obbligatorio(campi["fornitore"], "fornitore")
        if "data_ora" in campi:
            p.data_ora = a_utc(campi["data_ora"])
        if "data_ora_fine" in campi:
            p.data_ora_fine = a_utc(campi["data_ora_fine"]) if campi["data_ora_fine"] else None
        if "numero_persone" in campi:
            p.numero_persone = _persone(campi["numero_persone"])

        s.flush()
        row = prenotazione_to_row(p)

    logger.info("Prenotazione %s aggiornata", prenotazione_id)
    feed.pubblica(NotificaModifica(UPDATE, new=row, old=old))
    return row


def elimina_prenotazione(prenotazione_id: str) -> bool:
    """Elimina la prenotazione; False se non esisteva già."""
    with db_session() as s:
        p = s.get(Prenotazione, prenotazione_id)
        if not p:
            return False
        old = prenotazione_to_row(p)
        s.delete(p)

    logger.info("Prenotazione %s eliminata da %s", prenotazione_id, old["sala"])
    feed.pubblica(NotificaModifica(DELETE, old=old))
    return True
