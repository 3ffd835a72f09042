from backend.sale import SALE, get_sala, link_sala, lista_sale_flat, nomi_sale


def test_catalogo():
    assert nomi_sale() == ["Sala 1", "Sala 2", "Sala 3", "Sala 4"]
    assert len({s.colore for s in SALE}) == len(SALE)
    assert lista_sale_flat()[0] == {"nome": "Sala 1", "colore": "#2563eb", "immagine": "static/sala1.jpg"}


def test_get_sala():
    assert get_sala("Sala 2").colore == "#16a34a"
    assert get_sala("Sala 9") is None


def test_link_codifica_il_nome():
    assert link_sala("Sala 1") == "?sala=Sala%201"
    assert link_sala("A&B/C") == "?sala=A%26B%2FC"
