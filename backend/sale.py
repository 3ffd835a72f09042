from __future__ import annotations

from dataclasses import asdict, dataclass
from urllib.parse import quote


@dataclass(frozen=True)
class Sala:
    nome: str
    colore: str
    immagine: str


# Catalogo fisso: le sale non sono gestite a database
SALE: tuple[Sala, ...] = (
    Sala("Sala 1", "#2563eb", "static/sala1.jpg"),
    Sala("Sala 2", "#16a34a", "static/sala2.jpg"),
    Sala("Sala 3", "#d97706", "static/sala3.jpg"),
    Sala("Sala 4", "#9333ea", "static/sala4.jpg"),
)


def nomi_sale() -> list[str]:
    return [s.nome for s in SALE]


def get_sala(nome: str) -> Sala | None:
    for s in SALE:
        if s.nome == nome:
            return s
    return None


def lista_sale_flat() -> list[dict]:
    return [asdict(s) for s in SALE]


def link_sala(nome: str) -> str:
    """Link relativo alla vista calendario: il nome sala viaggia URL-encoded."""
    return f"?sala={quote(nome, safe='')}"
