"""
Errori del client prenotazioni.

Ogni categoria corrisponde a una chiamata al backend fallita e porta con sé
un messaggio breve da mostrare nel banner dell'interfaccia.
"""
from __future__ import annotations


class ErrorePrenotazioni(Exception):
    """Base per tutti gli errori verso il backend prenotazioni."""

    messaggio = "Errore di comunicazione con il backend"

    def __init__(self, dettaglio: str | None = None) -> None:
        self.dettaglio = dettaglio
        super().__init__(dettaglio or self.messaggio)


class FetchError(ErrorePrenotazioni):
    messaggio = "Errore nel caricamento delle prenotazioni"


class InsertError(ErrorePrenotazioni):
    messaggio = "Errore nella creazione della prenotazione"


class UpdateError(ErrorePrenotazioni):
    messaggio = "Errore durante l'aggiornamento"


class DeleteError(ErrorePrenotazioni):
    messaggio = "Errore durante l'eliminazione"
