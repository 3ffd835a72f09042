from unittest.mock import patch

import pytest

from backend import cli
from backend.errors import FetchError
from backend.services import lista_prenotazioni_flat


def test_seed_idempotente(capsys):
    cli.main(["seed"])
    assert "12 prenotazioni" in capsys.readouterr().out
    assert len(lista_prenotazioni_flat("Sala 1")) == 3

    cli.main(["seed"])
    assert "0 prenotazioni" in capsys.readouterr().out


def test_sale(capsys):
    cli.main(["sale"])
    out = capsys.readouterr().out
    assert "Sala 1 | #2563eb" in out


@patch("backend.cli.RepositoryPrenotazioni")
def test_prenota_passa_dall_api(repo_cls, capsys):
    repo_cls.return_value.crea.return_value = {"id": "abc"}
    cli.main([
        "--api", "http://api.test",
        "prenota", "--sala", "Sala 1", "--utente", "Bob", "--fornitore", "Acme",
        "--persone", "2", "--inizio", "2024-01-01T09:00Z",
    ])
    repo_cls.assert_called_once_with(base_url="http://api.test")
    repo_cls.return_value.crea.assert_called_once_with(
        sala="Sala 1",
        utente="Bob",
        fornitore="Acme",
        numero_persone=2,
        data_ora="2024-01-01T09:00Z",
        data_ora_fine=None,
    )
    assert "abc" in capsys.readouterr().out


@patch("backend.cli.RepositoryPrenotazioni")
def test_modifica_solo_campi_indicati(repo_cls):
    cli.main(["modifica", "--id", "abc", "--utente", "Carla", "--senza-fine"])
    repo_cls.return_value.aggiorna.assert_called_once_with("abc", {"utente": "Carla", "data_ora_fine": None})


@patch("backend.cli.RepositoryPrenotazioni")
def test_errore_api_diventa_exit(repo_cls):
    repo_cls.return_value.lista.side_effect = FetchError("connessione rifiutata")
    with pytest.raises(SystemExit, match="Errore nel caricamento delle prenotazioni"):
        cli.main(["lista", "--sala", "Sala 1"])
