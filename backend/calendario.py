"""
Stato del calendario di una sala e riconciliazione delle notifiche realtime.

- StatoCalendario : lista eventi della sala visualizzata + applicazione
                    idempotente di INSERT/UPDATE/DELETE remoti
- SessioneSala    : vista calendario "montata" (stato, canale realtime,
                    flag loading, banner errore, dettaglio aperto)
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from .client import RepositoryPrenotazioni
from .errors import DeleteError, FetchError, InsertError, UpdateError
from .moduli import valida_prenotazione
from .orari import a_utc
from .realtime import DELETE, INSERT, UPDATE, CanaleRealtime, NotificaModifica

logger = logging.getLogger(__name__)


@dataclass
class EventoCalendario:
    id: str
    title: str
    start: str
    end: str | None
    sala: str
    utente: str
    fornitore: str
    numero_persone: int | None = None
    all_day: bool = False

    def to_fullcalendar(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start,
            "end": self.end,
            "allDay": self.all_day,
            "extendedProps": {
                "utente": self.utente,
                "fornitore": self.fornitore,
                "numero_persone": self.numero_persone,
                "sala": self.sala,
            },
        }


def titolo_evento(utente: str, fornitore: str, numero_persone: int | None) -> str:
    if numero_persone is None:
        return f"{utente} - {fornitore}"
    return f"{utente} - {fornitore} ({numero_persone} pers.)"


def evento_da_prenotazione(row: dict[str, Any]) -> EventoCalendario:
    return EventoCalendario(
        id=row["id"],
        title=titolo_evento(row["utente"], row["fornitore"], row.get("numero_persone")),
        start=row["data_ora"],
        end=row.get("data_ora_fine") or None,
        sala=row["sala"],
        utente=row["utente"],
        fornitore=row["fornitore"],
        numero_persone=row.get("numero_persone"),
    )


def _chiave_inizio(evento: EventoCalendario):
    return a_utc(evento.start)


class StatoCalendario:
    """
    Lista ordinata degli eventi di una sala.

    L'ordine per inizio vale solo subito dopo `carica`: gli eventi aggiunti
    da notifiche o da un rollback vanno in coda.
    """

    def __init__(self, sala: str) -> None:
        self.sala = sala
        self._events: list[EventoCalendario] = []
        # le notifiche arrivano dal thread del canale realtime
        self._lock = threading.RLock()

    @property
    def events(self) -> list[EventoCalendario]:
        with self._lock:
            return list(self._events)

    def trova(self, evento_id: str) -> EventoCalendario | None:
        with self._lock:
            return next((e for e in self._events if e.id == evento_id), None)

    def carica(self, rows: list[dict[str, Any]]) -> None:
        eventi = sorted((evento_da_prenotazione(r) for r in rows), key=_chiave_inizio)
        with self._lock:
            self._events = eventi

    def rimuovi(self, evento_id: str) -> EventoCalendario | None:
        with self._lock:
            for i, e in enumerate(self._events):
                if e.id == evento_id:
                    return self._events.pop(i)
        return None

    def accoda(self, evento: EventoCalendario) -> None:
        with self._lock:
            self._events.append(evento)

    def applica_notifica(self, notifica: NotificaModifica) -> bool:
        """Applica una modifica remota; True se la lista è cambiata."""
        if notifica.event_type == DELETE:
            # nessun filtro per sala: gli id sono univoci su tutte le sale
            old_id = (notifica.old or {}).get("id")
            return old_id is not None and self.rimuovi(old_id) is not None

        new = notifica.new or {}
        if notifica.event_type == INSERT:
            if new.get("sala") != self.sala:
                return False
            self.accoda(evento_da_prenotazione(new))
            return True

        if notifica.event_type == UPDATE:
            if new.get("sala") != self.sala:
                # prenotazione spostata in un'altra sala
                return self.rimuovi(new.get("id")) is not None
            aggiornato = evento_da_prenotazione(new)
            with self._lock:
                for i, e in enumerate(self._events):
                    if e.id == aggiornato.id:
                        self._events[i] = aggiornato
                        return True
            return False

        logger.warning("Notifica realtime sconosciuta: %s", notifica.event_type)
        return False


@dataclass
class SessioneSala:
    """
    Vista calendario di una sala, con una sola iscrizione realtime aperta
    da `apri()` e chiusa da `chiudi()`.
    """
    sala: str
    repository: RepositoryPrenotazioni
    stato: StatoCalendario = field(init=False)
    loading: bool = False
    errore: str | None = None
    selezionato: EventoCalendario | None = None
    _canale: CanaleRealtime | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.stato = StatoCalendario(self.sala)

    @property
    def events(self) -> list[EventoCalendario]:
        return self.stato.events

    @property
    def aperta(self) -> bool:
        return self._canale is not None

    # Ciclo di vita

    def apri(self) -> SessioneSala:
        if self._canale is None:
            self._canale = self.repository.canale(self._su_notifica)
            self._canale.apri()
        self.ricarica()
        return self

    def chiudi(self) -> None:
        if self._canale is not None:
            self._canale.chiudi()
            self._canale = None

    def __enter__(self) -> SessioneSala:
        return self.apri()

    def __exit__(self, *exc: object) -> None:
        self.chiudi()

    def _su_notifica(self, notifica: NotificaModifica) -> None:
        logger.debug("Realtime %s su %s", notifica.event_type, self.sala)
        if self.stato.applica_notifica(notifica) and self.selezionato is not None:
            # il dettaglio aperto segue la lista: aggiornato o chiuso se la riga è sparita
            self.selezionato = self.stato.trova(self.selezionato.id)

    # Banner / dettaglio

    def chiudi_errore(self) -> None:
        self.errore = None

    def seleziona(self, evento_id: str) -> EventoCalendario | None:
        self.selezionato = self.stato.trova(evento_id)
        return self.selezionato

    def chiudi_dettaglio(self) -> None:
        self.selezionato = None

    # Azioni

    def ricarica(self) -> bool:
        self.loading = True
        self.errore = None
        try:
            rows = self.repository.lista(self.sala)
        except FetchError as e:
            logger.warning("Caricamento prenotazioni %s fallito: %s", self.sala, e)
            self.errore = e.messaggio
            return False
        finally:
            self.loading = False
        self.stato.carica(rows)
        return True

    def crea(self, utente, fornitore, numero_persone, data_ora, data_ora_fine=None) -> bool:
        """Nessun aggiornamento ottimistico: l'evento arriva dalla notifica INSERT."""
        dati, errori = valida_prenotazione(utente, fornitore, numero_persone, data_ora, data_ora_fine)
        if errori:
            self.errore = " ".join(errori)
            return False

        self.loading = True
        self.errore = None
        try:
            self.repository.crea(
                sala=self.sala,
                utente=dati.utente,
                fornitore=dati.fornitore,
                numero_persone=dati.numero_persone,
                data_ora=dati.data_ora,
                data_ora_fine=dati.data_ora_fine,
            )
        except InsertError as e:
            logger.warning("Creazione prenotazione in %s fallita: %s", self.sala, e)
            self.errore = e.messaggio
            return False
        finally:
            self.loading = False
        return True

    def aggiorna(self, utente, fornitore, numero_persone, data_ora, data_ora_fine=None) -> bool:
        """Aggiorna la prenotazione selezionata; il dettaglio si chiude solo a buon fine."""
        evento = self.selezionato
        if evento is None:
            return False

        dati, errori = valida_prenotazione(utente, fornitore, numero_persone, data_ora, data_ora_fine)
        if errori:
            self.errore = " ".join(errori)
            return False

        self.loading = True
        self.errore = None
        try:
            self.repository.aggiorna(
                evento.id,
                {
                    "utente": dati.utente,
                    "fornitore": dati.fornitore,
                    "numero_persone": dati.numero_persone,
                    "data_ora": dati.data_ora,
                    "data_ora_fine": dati.data_ora_fine,
                },
            )
        except UpdateError as e:
            logger.warning("Aggiornamento prenotazione %s fallito: %s", evento.id, e)
            self.errore = e.messaggio
            return False
        finally:
            self.loading = False
        self.chiudi_dettaglio()
        return True

    def elimina(self, evento_id: str | None = None) -> bool:
        """
        Eliminazione ottimistica: l'evento sparisce subito dalla lista e, se il
        backend fallisce, viene riaccodato in fondo.
        """
        evento_id = evento_id or (self.selezionato.id if self.selezionato else None)
        if evento_id is None:
            return False

        rimosso = self.stato.rimuovi(evento_id)

        self.loading = True
        self.errore = None
        try:
            self.repository.elimina(evento_id)
        except DeleteError as e:
            logger.warning("Eliminazione prenotazione %s fallita: %s", evento_id, e)
            self.errore = e.messaggio
            if rimosso is not None:
                self.stato.accoda(rimosso)
            return False
        finally:
            self.loading = False
        self.chiudi_dettaglio()
        return True
