"""
Griglie del calendario (mese / settimana / giorno) come DataFrame pandas.

La posizione di ogni evento è ricavata dai suoi inizio/fine, quindi l'ordine
della lista eventi non influisce sulla griglia.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable

import pandas as pd
from dateutil.relativedelta import relativedelta

from .calendario import EventoCalendario
from .orari import a_utc

MESE = "dayGridMonth"
SETTIMANA = "timeGridWeek"
GIORNO = "timeGridDay"

VISTE = {MESE: "Mese", SETTIMANA: "Settimana", GIORNO: "Giorno"}
VISTA_INIZIALE = SETTIMANA

# fascia oraria visibile nelle viste a griglia oraria
SLOT_MIN = time(8, 0)
SLOT_MAX = time(20, 0)
SLOT_MINUTI = 30

# durata mostrata per le prenotazioni senza fine
DURATA_PREDEFINITA = timedelta(hours=1)

GIORNI_IT = ["Lun", "Mar", "Mer", "Gio", "Ven", "Sab", "Dom"]
MESI_IT = [
    "gennaio", "febbraio", "marzo", "aprile", "maggio", "giugno",
    "luglio", "agosto", "settembre", "ottobre", "novembre", "dicembre",
]


def intervallo_evento(evento: EventoCalendario) -> tuple[datetime, datetime]:
    inizio = a_utc(evento.start)
    fine = a_utc(evento.end) if evento.end else inizio + DURATA_PREDEFINITA
    return inizio, fine


def giorni_vista(vista: str, riferimento: date) -> list[date]:
    """Giorni mostrati dalla vista (settimane da lunedì)."""
    if vista == GIORNO:
        return [riferimento]
    if vista == SETTIMANA:
        lunedi = riferimento - timedelta(days=riferimento.weekday())
        return [lunedi + timedelta(days=i) for i in range(7)]
    if vista == MESE:
        primo = riferimento.replace(day=1)
        ultimo = primo + relativedelta(months=1) - timedelta(days=1)
        inizio = primo - timedelta(days=primo.weekday())
        fine = ultimo + timedelta(days=6 - ultimo.weekday())
        return [inizio + timedelta(days=i) for i in range((fine - inizio).days + 1)]
    raise ValueError(f"Vista sconosciuta: {vista}")


def sposta(vista: str, riferimento: date, passi: int) -> date:
    """Navigazione prev/next: passi negativi vanno indietro."""
    if vista == MESE:
        return riferimento + relativedelta(months=passi)
    if vista == SETTIMANA:
        return riferimento + timedelta(weeks=passi)
    return riferimento + timedelta(days=passi)


def titolo_vista(vista: str, riferimento: date) -> str:
    if vista == MESE:
        return f"{MESI_IT[riferimento.month - 1]} {riferimento.year}"
    giorni = giorni_vista(vista, riferimento)
    if len(giorni) == 1:
        return f"{giorni[0].day} {MESI_IT[giorni[0].month - 1]} {giorni[0].year}"
    return f"{giorni[0]:%d/%m} – {giorni[-1]:%d/%m/%Y}"


def _etichetta_giorno(g: date) -> str:
    return f"{GIORNI_IT[g.weekday()]} {g:%d/%m}"


def griglia_oraria(eventi: Iterable[EventoCalendario], giorni: list[date]) -> pd.DataFrame:
    """Slot da SLOT_MINUTI (righe) per giorno (colonne); celle con i titoli sovrapposti."""
    base = date(2000, 1, 1)
    slots = pd.date_range(
        datetime.combine(base, SLOT_MIN),
        datetime.combine(base, SLOT_MAX),
        freq=f"{SLOT_MINUTI}min",
        inclusive="left",
    )
    indice = [s.strftime("%H:%M") for s in slots]
    colonne = [_etichetta_giorno(g) for g in giorni]
    celle: dict[tuple[str, str], list[str]] = {}

    passo = timedelta(minutes=SLOT_MINUTI)
    for evento in eventi:
        inizio, fine = intervallo_evento(evento)
        for g, col in zip(giorni, colonne):
            for etichetta, s in zip(indice, slots):
                slot_inizio = datetime.combine(g, s.time())
                # sovrapposizione [inizio, fine) con lo slot
                if inizio < slot_inizio + passo and fine > slot_inizio:
                    celle.setdefault((etichetta, col), []).append(evento.title)

    df = pd.DataFrame("", index=indice, columns=colonne)
    for (riga, col), titoli in celle.items():
        df.loc[riga, col] = " | ".join(titoli)
    df.index.name = "Ora"
    return df


def griglia_mensile(eventi: Iterable[EventoCalendario], riferimento: date) -> pd.DataFrame:
    """Settimane (righe) per giorno della settimana (colonne)."""
    giorni = giorni_vista(MESE, riferimento)
    per_giorno: dict[date, list[tuple[datetime, str]]] = {}
    for evento in eventi:
        inizio, fine = intervallo_evento(evento)
        g = inizio.date()
        # un evento che attraversa più giorni compare in ognuno
        while g <= max(inizio.date(), (fine - timedelta(microseconds=1)).date()):
            per_giorno.setdefault(g, []).append((inizio, evento.title))
            g += timedelta(days=1)

    righe = []
    for i in range(0, len(giorni), 7):
        settimana = giorni[i:i + 7]
        riga = {}
        for g in settimana:
            voci = [f"{ora:%H:%M} {titolo}" for ora, titolo in sorted(per_giorno.get(g, []))]
            testa = f"{g.day}" if g.month == riferimento.month else f"({g.day})"
            riga[GIORNI_IT[g.weekday()]] = "\n".join([testa, *voci])
        righe.append(riga)

    df = pd.DataFrame(righe, columns=GIORNI_IT)
    df.index = [f"{giorni[i]:%d/%m}" for i in range(0, len(giorni), 7)]
    df.index.name = "Settimana"
    return df


def griglia(vista: str, eventi: Iterable[EventoCalendario], riferimento: date) -> pd.DataFrame:
    if vista == MESE:
        return griglia_mensile(eventi, riferimento)
    return griglia_oraria(eventi, giorni_vista(vista, riferimento))


def selezione_intervallo(giorno: date, ora_inizio: time, ora_fine: time | None) -> tuple[datetime, datetime | None]:
    """Intervallo selezionato sulla griglia → inizio/fine precompilati per la creazione."""
    inizio = datetime.combine(giorno, ora_inizio)
    fine = datetime.combine(giorno, ora_fine) if ora_fine else None
    return inizio, fine
