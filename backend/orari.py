from __future__ import annotations

from datetime import datetime, timezone


def a_utc(valore: datetime | str | None) -> datetime:
    """
    Normalizza un timestamp in datetime UTC naive (formato di salvataggio).
    Le stringhe sono ISO-8601, anche con 'Z'; i valori senza offset sono già UTC.
    """
    if valore is None:
        raise ValueError("Data e ora non specificate.")
    if isinstance(valore, str):
        testo = valore.strip()
        if not testo:
            raise ValueError("Data e ora non specificate.")
        if testo.endswith(("Z", "z")):
            testo = testo[:-1] + "+00:00"
        try:
            valore = datetime.fromisoformat(testo)
        except ValueError:
            raise ValueError(f"Data e ora non valide: {valore!r}") from None
    if valore.tzinfo is not None:
        valore = valore.astimezone(timezone.utc).replace(tzinfo=None)
    return valore


def iso_utc(valore: datetime | None) -> str | None:
    if valore is None:
        return None
    return valore.replace(microsecond=0).isoformat() + "Z"
