from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .orari import a_utc


@dataclass(frozen=True)
class DatiPrenotazione:
    """Campi del modulo crea/modifica, già ripuliti."""
    utente: str
    fornitore: str
    numero_persone: int
    data_ora: datetime
    data_ora_fine: datetime | None


def _intero_positivo(valore: object) -> int | None:
    if isinstance(valore, bool):
        return None
    if isinstance(valore, int):
        return valore if valore > 0 else None
    if isinstance(valore, float):
        return int(valore) if valore.is_integer() and valore > 0 else None
    if isinstance(valore, str) and valore.strip().isdigit():
        n = int(valore.strip())
        return n if n > 0 else None
    return None


def valida_prenotazione(
    utente: str | None,
    fornitore: str | None,
    numero_persone: object,
    data_ora: datetime | str | None,
    data_ora_fine: datetime | str | None = None,
) -> tuple[DatiPrenotazione | None, list[str]]:
    """
    Validazione lato client prima di chiamare il backend.
    Nessun controllo incrociato tra inizio e fine.
    """
    errori: list[str] = []

    utente = (utente or "").strip()
    fornitore = (fornitore or "").strip()
    if not utente:
        errori.append("Il nome utente è obbligatorio.")
    if not fornitore:
        errori.append("Il nome fornitore è obbligatorio.")

    persone = _intero_positivo(numero_persone)
    if persone is None:
        errori.append("Il numero di persone deve essere un intero positivo.")

    inizio = None
    try:
        inizio = a_utc(data_ora)
    except ValueError as e:
        errori.append(f"Inizio: {e}")

    fine = None
    if data_ora_fine not in (None, ""):
        try:
            fine = a_utc(data_ora_fine)
        except ValueError as e:
            errori.append(f"Fine: {e}")

    if errori:
        return None, errori
    return DatiPrenotazione(utente, fornitore, persone, inizio, fine), []
