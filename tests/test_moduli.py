from datetime import datetime

import pytest

from backend.moduli import valida_prenotazione


def test_valido():
    dati, errori = valida_prenotazione(" Bob ", "Acme", "3", "2024-01-01T09:00:00Z", "")
    assert errori == []
    assert dati.utente == "Bob"
    assert dati.numero_persone == 3
    assert dati.data_ora == datetime(2024, 1, 1, 9)
    assert dati.data_ora_fine is None


def test_tutti_gli_errori_insieme():
    dati, errori = valida_prenotazione("", None, -1, None)
    assert dati is None
    assert errori[:3] == [
        "Il nome utente è obbligatorio.",
        "Il nome fornitore è obbligatorio.",
        "Il numero di persone deve essere un intero positivo.",
    ]
    assert errori[3].startswith("Inizio:")


@pytest.mark.parametrize("persone", [0, -2, 1.5, "due", "", None, True])
def test_persone_non_valide(persone):
    _, errori = valida_prenotazione("Bob", "Acme", persone, datetime(2024, 1, 1, 9))
    assert errori == ["Il numero di persone deve essere un intero positivo."]


def test_fine_non_valida():
    _, errori = valida_prenotazione("Bob", "Acme", 2, datetime(2024, 1, 1, 9), "ieri")
    assert len(errori) == 1
    assert errori[0].startswith("Fine:")


def test_fine_prima_di_inizio_accettata():
    dati, errori = valida_prenotazione("Bob", "Acme", 2, datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 8))
    assert errori == []
    assert dati.data_ora_fine < dati.data_ora
