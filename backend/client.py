"""
Adapter HTTP verso l'API prenotazioni.

Traduce le azioni del calendario in chiamate CRUD sulla tabella prenotazioni,
sempre filtrate per sala. Ogni errore di rete o HTTP diventa la categoria di
`backend.errors` corrispondente all'operazione.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

import requests

from .config import API_BASE, HTTP_TIMEOUT
from .errors import DeleteError, FetchError, InsertError, UpdateError
from .realtime import CanaleRealtime, NotificaModifica

logger = logging.getLogger(__name__)


def _iso(valore: datetime | str | None) -> str | None:
    if valore is None or isinstance(valore, str):
        return valore or None
    return valore.isoformat()


def _dettaglio(e: requests.RequestException) -> str:
    r = e.response
    if r is None:
        return str(e)
    try:
        return str(r.json().get("detail") or r.text)
    except ValueError:
        return r.text or str(e)


class RepositoryPrenotazioni:
    def __init__(
        self,
        base_url: str = API_BASE,
        timeout: float = HTTP_TIMEOUT,
        http: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        r = self.http.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        r.raise_for_status()
        return r.json()

    # Query

    def sale(self) -> list[dict]:
        try:
            return self._request("GET", "/api/sale")
        except requests.RequestException as e:
            logger.warning("Caricamento sale fallito: %s", e)
            raise FetchError(_dettaglio(e)) from e

    def lista(self, sala: str) -> list[dict]:
        """Prenotazioni della sala in ordine crescente di data_ora."""
        try:
            return self._request("GET", "/api/prenotazioni", params={"sala": sala})
        except requests.RequestException as e:
            logger.warning("Fetch prenotazioni %s fallito: %s", sala, e)
            raise FetchError(_dettaglio(e)) from e

    def get(self, prenotazione_id: str) -> dict:
        try:
            return self._request("GET", f"/api/prenotazioni/{prenotazione_id}")
        except requests.RequestException as e:
            logger.warning("Fetch prenotazione %s fallito: %s", prenotazione_id, e)
            raise FetchError(_dettaglio(e)) from e

    # CRUD

    def crea(
        self,
        sala: str,
        utente: str,
        fornitore: str,
        numero_persone: int | None,
        data_ora: datetime | str,
        data_ora_fine: datetime | str | None = None,
    ) -> dict:
        payload = {
            "sala": sala,
            "utente": utente,
            "fornitore": fornitore,
            "numero_persone": numero_persone,
            "data_ora": _iso(data_ora),
            "data_ora_fine": _iso(data_ora_fine),
        }
        try:
            return self._request("POST", "/api/prenotazioni", json=payload)
        except requests.RequestException as e:
            logger.warning("Insert prenotazione in %s fallito: %s", sala, e)
            raise InsertError(_dettaglio(e)) from e

    def aggiorna(self, prenotazione_id: str, campi: dict[str, Any]) -> dict:
        payload = {k: (_iso(v) if k.startswith("data_ora") else v) for k, v in campi.items()}
        try:
            return self._request("PATCH", f"/api/prenotazioni/{prenotazione_id}", json=payload)
        except requests.RequestException as e:
            logger.warning("Update prenotazione %s fallito: %s", prenotazione_id, e)
            raise UpdateError(_dettaglio(e)) from e

    def elimina(self, prenotazione_id: str) -> bool:
        try:
            return bool(self._request("DELETE", f"/api/prenotazioni/{prenotazione_id}").get("eliminata"))
        except requests.RequestException as e:
            logger.warning("Delete prenotazione %s fallito: %s", prenotazione_id, e)
            raise DeleteError(_dettaglio(e)) from e

    # Realtime

    def canale(self, callback: Callable[[NotificaModifica], None]) -> CanaleRealtime:
        """Canale (non ancora aperto) sulle modifiche di tutta la tabella."""
        return CanaleRealtime(f"{self.base_url}/api/realtime/prenotazioni", callback, timeout=self.timeout)
