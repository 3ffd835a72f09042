import os
import tempfile
from pathlib import Path

# il motore SQLAlchemy viene creato all'import di backend.db
_TMP = Path(tempfile.mkdtemp(prefix="sale_riunioni_test_"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.sqlite'}"

import pytest

from backend import models  # noqa: F401  (registra le tabelle su Base.metadata)
from backend.db import Base, engine
from backend.realtime import feed


@pytest.fixture(autouse=True)
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def iscrizione():
    iscr = feed.iscrivi()
    yield iscr
    iscr.chiudi()


@pytest.fixture
def riga():
    def _riga(id="a", sala="Sala 1", data_ora="2024-01-01T09:00:00Z", data_ora_fine=None,
              utente="Bob", fornitore="Acme", numero_persone=2):
        return {
            "id": id,
            "sala": sala,
            "data_ora": data_ora,
            "data_ora_fine": data_ora_fine,
            "utente": utente,
            "fornitore": fornitore,
            "numero_persone": numero_persone,
        }
    return _riga
