"""
Notifiche realtime sulla tabella prenotazioni.

Lato server `FeedModifiche` distribuisce ogni INSERT/UPDATE/DELETE a tutti gli
iscritti (una coda per iscrizione); l'API le espone come stream SSE.
Lato client `CanaleRealtime` legge lo stream su un thread dedicato e passa
ogni notifica a una callback.
"""
from __future__ import annotations

import json
import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

import requests

from .config import HTTP_TIMEOUT, REALTIME_KEEPALIVE

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


@dataclass(frozen=True)
class NotificaModifica:
    event_type: str
    new: dict[str, Any] | None = None
    old: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"eventType": self.event_type, "new": self.new, "old": self.old}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NotificaModifica:
        return cls(
            event_type=str(data.get("eventType", "")).upper(),
            new=data.get("new") or None,
            old=data.get("old") or None,
        )


# =========================
# Lato server
# =========================
class Iscrizione:
    def __init__(self, feed: FeedModifiche) -> None:
        self._feed = feed
        self._coda: queue.Queue[NotificaModifica] = queue.Queue()
        self.chiusa = False

    def consegna(self, notifica: NotificaModifica) -> None:
        self._coda.put(notifica)

    def prossima(self, timeout: float | None = None) -> NotificaModifica | None:
        """Attende la prossima notifica; None se scade il timeout."""
        try:
            return self._coda.get(timeout=timeout)
        except queue.Empty:
            return None

    def chiudi(self) -> None:
        if not self.chiusa:
            self.chiusa = True
            self._feed.disiscrivi(self)


class FeedModifiche:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._iscrizioni: set[Iscrizione] = set()

    @property
    def numero_iscritti(self) -> int:
        with self._lock:
            return len(self._iscrizioni)

    def iscrivi(self) -> Iscrizione:
        iscr = Iscrizione(self)
        with self._lock:
            self._iscrizioni.add(iscr)
        logger.debug("Nuova iscrizione realtime (%s attive)", self.numero_iscritti)
        return iscr

    def disiscrivi(self, iscr: Iscrizione) -> None:
        with self._lock:
            self._iscrizioni.discard(iscr)

    def pubblica(self, notifica: NotificaModifica) -> None:
        with self._lock:
            destinatari = list(self._iscrizioni)
        for iscr in destinatari:
            iscr.consegna(notifica)
        logger.debug("Pubblicata %s a %s iscritti", notifica.event_type, len(destinatari))


# feed unico di processo, usato da services e API
feed = FeedModifiche()


def formatta_sse(notifica: NotificaModifica) -> str:
    return f"data: {json.dumps(notifica.to_dict())}\n\n"


def stream_sse(iscr: Iscrizione, keepalive: float = REALTIME_KEEPALIVE) -> Iterator[str]:
    """Generatore per StreamingResponse: notifiche + commenti keep-alive."""
    try:
        yield ": connesso\n\n"
        while not iscr.chiusa:
            notifica = iscr.prossima(timeout=keepalive)
            if notifica is None:
                yield ": ping\n\n"
                continue
            yield formatta_sse(notifica)
    finally:
        iscr.chiudi()


# =========================
# Lato client
# =========================
def leggi_sse(righe: Iterable[str]) -> Iterator[NotificaModifica]:
    """Decodifica le righe di uno stream SSE in notifiche (commenti ignorati)."""
    dati: list[str] = []
    for riga in righe:
        if riga == "":
            if dati:
                payload = "\n".join(dati)
                dati = []
                try:
                    yield NotificaModifica.from_dict(json.loads(payload))
                except (ValueError, AttributeError):
                    logger.warning("Messaggio realtime non valido: %r", payload)
            continue
        if riga.startswith(":"):
            continue
        if riga.startswith("data:"):
            valore = riga[len("data:"):]
            dati.append(valore[1:] if valore.startswith(" ") else valore)


class CanaleRealtime:
    """
    Iscrizione client allo stream realtime, con apertura/chiusura esplicite.

    Usabile come context manager:

        with CanaleRealtime(url, callback):
            ...
    """

    def __init__(
        self,
        url: str,
        callback: Callable[[NotificaModifica], None],
        http: requests.Session | None = None,
        timeout: float = HTTP_TIMEOUT,
    ) -> None:
        self.url = url
        self._callback = callback
        self._http = http or requests.Session()
        self._timeout = timeout
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._risposta: requests.Response | None = None

    @property
    def aperto(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def apri(self) -> CanaleRealtime:
        if self._thread is not None:
            raise RuntimeError("Canale realtime già aperto.")
        self._stop.clear()
        self._thread = threading.Thread(target=self._ascolta, name="realtime-prenotazioni", daemon=True)
        self._thread.start()
        return self

    def chiudi(self) -> None:
        self._stop.set()
        if self._risposta is not None:
            self._risposta.close()
        if self._thread is not None:
            self._thread.join(timeout=1)
        self._thread = None
        self._risposta = None

    def __enter__(self) -> CanaleRealtime:
        return self.apri()

    def __exit__(self, *exc: object) -> None:
        self.chiudi()

    def _righe(self, r: requests.Response) -> Iterator[str]:
        # anche i keep-alive passano di qui: la chiusura non aspetta una notifica
        for riga in r.iter_lines(chunk_size=1, decode_unicode=True):
            if self._stop.is_set():
                return
            yield riga

    def _consegna(self, notifica: NotificaModifica) -> None:
        try:
            self._callback(notifica)
        except Exception:
            logger.exception("Notifica realtime %s non applicata", notifica.event_type)

    def _ascolta(self) -> None:
        # timeout di lettura nullo: lo stream resta aperto finché il canale non viene chiuso
        try:
            with self._http.get(self.url, stream=True, timeout=(self._timeout, None)) as r:
                r.raise_for_status()
                self._risposta = r
                if self._stop.is_set():
                    # chiuso mentre la connessione era in corso
                    return
                logger.info("Canale realtime aperto su %s", self.url)
                for notifica in leggi_sse(self._righe(r)):
                    if self._stop.is_set():
                        break
                    self._consegna(notifica)
        except (requests.RequestException, AttributeError, ValueError) as e:
            # la chiusura del socket durante la lettura arriva qui come errore di rete
            if not self._stop.is_set():
                logger.warning("Canale realtime interrotto: %s", e)
        logger.info("Canale realtime chiuso su %s", self.url)
