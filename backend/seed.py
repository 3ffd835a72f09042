from __future__ import annotations

from datetime import date, datetime, time, timedelta

from sqlalchemy import select

from .db import db_session
from .models import Prenotazione
from .sale import nomi_sale


def seed_demo(giorno: date | None = None) -> int:
    """
    Popola qualche prenotazione dimostrativa nella settimana di `giorno`
    (idempotente: salta le sale che hanno già prenotazioni).
    Ritorna il numero di prenotazioni inserite.
    """
    giorno = giorno or date.today()
    lunedi = giorno - timedelta(days=giorno.weekday())

    demo = [
        # (giorno della settimana, ora, durata ore, utente, fornitore, persone)
        (0, 9, 1, "Mario Rossi", "Catering Bianchi", 6),
        (1, 14, 2, "Laura Verdi", "AV Service", 12),
        (3, 10, 1, "Paolo Neri", "Pulizie Gallo", 3),
    ]

    inserite = 0
    with db_session() as s:
        for sala in nomi_sale():
            if s.execute(select(Prenotazione.id).where(Prenotazione.sala == sala).limit(1)).first():
                continue
            for wd, ora, durata, utente, fornitore, persone in demo:
                inizio = datetime.combine(lunedi + timedelta(days=wd), time(ora))
                s.add(
                    Prenotazione(
                        sala=sala,
                        data_ora=inizio,
                        data_ora_fine=inizio + timedelta(hours=durata),
                        utente=utente,
                        fornitore=fornitore,
                        numero_persone=persone,
                    )
                )
                inserite += 1
    return inserite
