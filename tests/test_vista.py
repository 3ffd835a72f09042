from datetime import date, datetime, time

import pytest

from backend.calendario import evento_da_prenotazione
from backend.vista import (
    GIORNO,
    MESE,
    SETTIMANA,
    giorni_vista,
    griglia,
    intervallo_evento,
    selezione_intervallo,
    sposta,
    titolo_vista,
)

LUNEDI = date(2024, 1, 1)


@pytest.fixture
def evento(riga):
    def _evento(id, inizio, fine=None, **kw):
        return evento_da_prenotazione(riga(id, data_ora=inizio, data_ora_fine=fine, **kw))
    return _evento


def test_durata_predefinita(evento):
    inizio, fine = intervallo_evento(evento("a", "2024-01-01T09:00:00Z"))
    assert fine - inizio == datetime(2024, 1, 1, 10) - datetime(2024, 1, 1, 9)


def test_giorni_vista():
    assert giorni_vista(GIORNO, LUNEDI) == [LUNEDI]
    settimana = giorni_vista(SETTIMANA, date(2024, 1, 3))
    assert settimana[0] == LUNEDI and len(settimana) == 7
    mese = giorni_vista(MESE, date(2024, 1, 15))
    assert mese[0] == LUNEDI
    assert mese[-1] == date(2024, 2, 4)
    with pytest.raises(ValueError):
        giorni_vista("listWeek", LUNEDI)


def test_sposta():
    assert sposta(MESE, date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert sposta(SETTIMANA, LUNEDI, -1) == date(2023, 12, 25)
    assert sposta(GIORNO, LUNEDI, 2) == date(2024, 1, 3)


def test_titolo_vista():
    assert titolo_vista(MESE, date(2024, 1, 15)) == "gennaio 2024"
    assert titolo_vista(SETTIMANA, date(2024, 1, 3)) == "01/01 – 07/01/2024"
    assert titolo_vista(GIORNO, LUNEDI) == "1 gennaio 2024"


def test_griglia_settimanale(evento):
    eventi = [
        evento("a", "2024-01-01T09:00:00Z", "2024-01-01T10:00:00Z"),
        evento("b", "2024-01-01T09:30:00Z", utente="Carla", numero_persone=None),
        evento("fuori", "2024-01-08T09:00:00Z"),
    ]
    df = griglia(SETTIMANA, eventi, LUNEDI)

    assert df.shape == (24, 7)
    assert df.index[0] == "08:00" and df.index[-1] == "19:30"
    assert df.loc["09:00", "Lun 01/01"] == "Bob - Acme (2 pers.)"
    assert df.loc["09:30", "Lun 01/01"] == "Bob - Acme (2 pers.) | Carla - Acme"
    assert df.loc["10:00", "Lun 01/01"] == "Carla - Acme"
    assert df.loc["10:30", "Lun 01/01"] == ""
    assert (df["Mar 02/01"] == "").all()


def test_griglia_indipendente_dall_ordine(evento):
    a = evento("a", "2024-01-01T09:00:00Z")
    b = evento("b", "2024-01-02T14:00:00Z")
    assert griglia(GIORNO, [a, b], LUNEDI).equals(griglia(GIORNO, [b, a], LUNEDI))


def test_griglia_mensile(evento):
    df = griglia(MESE, [evento("a", "2024-01-02T09:00:00Z")], date(2024, 1, 20))
    assert df.shape == (5, 7)
    assert df.index[0] == "01/01"
    assert df.loc["01/01", "Mar"] == "2\n09:00 Bob - Acme (2 pers.)"
    assert df.loc["29/01", "Gio"] == "(1)"


def test_selezione_intervallo():
    assert selezione_intervallo(LUNEDI, time(9), time(10)) == (datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10))
    assert selezione_intervallo(LUNEDI, time(9), None) == (datetime(2024, 1, 1, 9), None)
