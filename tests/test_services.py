import pytest
from datetime import datetime, timedelta, timezone

from backend.orari import a_utc
from backend.realtime import DELETE, INSERT, UPDATE
from backend.services import (
    aggiorna_prenotazione,
    crea_prenotazione,
    elimina_prenotazione,
    get_prenotazione_flat,
    lista_prenotazioni_flat,
)


def _crea(sala="Sala 1", inizio="2024-01-01T09:00:00Z", **kw):
    dati = {"utente": "Bob", "fornitore": "Acme", "numero_persone": 2}
    dati.update(kw)
    return crea_prenotazione(sala=sala, data_ora=inizio, **dati)


def test_crea_e_rilegge():
    row = _crea(data_ora_fine="2024-01-01T10:30:00+00:00")
    assert row["id"]
    assert row["data_ora"] == "2024-01-01T09:00:00Z"
    assert row["data_ora_fine"] == "2024-01-01T10:30:00Z"

    letta = get_prenotazione_flat(row["id"])
    assert letta == row


def test_creata_il_in_utc():
    prima = datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)
    row = _crea()
    creata = a_utc(row["creata_il"])
    assert creata.tzinfo is None
    assert prima <= creata <= prima + timedelta(minutes=1)


def test_offset_convertito_in_utc():
    row = _crea(inizio="2024-06-01T11:00:00+02:00")
    assert row["data_ora"] == "2024-06-01T09:00:00Z"


def test_lista_filtrata_per_sala_e_ordinata():
    _crea(inizio="2024-01-02T09:00:00Z", utente="Secondo")
    _crea(inizio="2024-01-01T09:00:00Z", utente="Primo")
    _crea(sala="Sala 2", inizio="2024-01-01T08:00:00Z", utente="Altra")

    rows = lista_prenotazioni_flat("Sala 1")
    assert [r["utente"] for r in rows] == ["Primo", "Secondo"]
    assert lista_prenotazioni_flat("Sala 9") == []


def test_crea_senza_fine_e_senza_persone():
    row = crea_prenotazione("Sala 1", "Bob", "Acme", datetime(2024, 1, 1, 9))
    assert row["data_ora_fine"] is None
    assert row["numero_persone"] is None


@pytest.mark.parametrize("persone", [0, -3, True])
def test_crea_rifiuta_persone_non_positive(persone):
    with pytest.raises(ValueError, match="intero positivo"):
        _crea(numero_persone=persone)


def test_crea_rifiuta_utente_vuoto():
    with pytest.raises(ValueError, match="utente"):
        _crea(utente="   ")


def test_aggiornamento_parziale():
    row = _crea()
    nuova = aggiorna_prenotazione(row["id"], {"utente": "Carla"})
    assert nuova["utente"] == "Carla"
    assert nuova["fornitore"] == "Acme"
    assert nuova["data_ora"] == row["data_ora"]


def test_aggiornamento_rimuove_fine():
    row = _crea(data_ora_fine="2024-01-01T10:00:00Z")
    nuova = aggiorna_prenotazione(row["id"], {"data_ora_fine": None})
    assert nuova["data_ora_fine"] is None


def test_sala_non_modificabile():
    row = _crea()
    with pytest.raises(ValueError, match="sala"):
        aggiorna_prenotazione(row["id"], {"sala": "Sala 2"})
    assert get_prenotazione_flat(row["id"])["sala"] == "Sala 1"


def test_campo_sconosciuto():
    row = _crea()
    with pytest.raises(ValueError, match="colore"):
        aggiorna_prenotazione(row["id"], {"colore": "rosso"})


def test_aggiorna_inesistente():
    assert aggiorna_prenotazione("non-esiste", {"utente": "X"}) is None


def test_elimina_idempotente():
    row = _crea()
    assert elimina_prenotazione(row["id"]) is True
    assert elimina_prenotazione(row["id"]) is False
    assert get_prenotazione_flat(row["id"]) is None


def test_notifiche_pubblicate(iscrizione):
    row = _crea()
    ins = iscrizione.prossima(timeout=0)
    assert ins.event_type == INSERT
    assert ins.new == row
    assert ins.old is None

    aggiorna_prenotazione(row["id"], {"numero_persone": 5})
    upd = iscrizione.prossima(timeout=0)
    assert upd.event_type == UPDATE
    assert upd.new["numero_persone"] == 5
    assert upd.old["numero_persone"] == 2

    elimina_prenotazione(row["id"])
    dele = iscrizione.prossima(timeout=0)
    assert dele.event_type == DELETE
    assert dele.old["id"] == row["id"]
    assert dele.new is None


def test_nessuna_notifica_senza_modifiche(iscrizione):
    assert elimina_prenotazione("non-esiste") is False
    assert aggiorna_prenotazione("non-esiste", {"utente": "X"}) is None
    assert iscrizione.prossima(timeout=0) is None
