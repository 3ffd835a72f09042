from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from backend.config import configura_logging
from backend.realtime import feed, stream_sse
from backend.sale import lista_sale_flat
from backend.services import (
    aggiorna_prenotazione,
    crea_prenotazione,
    elimina_prenotazione,
    get_prenotazione_flat,
    init_db,
    lista_prenotazioni_flat,
)

configura_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Sale Riunioni API", version="1.0.0")



# Startup

@app.on_event("startup")
def startup() -> None:
    # Crea tabelle (idempotente)
    init_db()
    logger.info("Sale Riunioni API pronta")



# Schemi

class PrenotazioneCreateIn(BaseModel):
    sala: str = Field(..., min_length=1)
    utente: str = Field(..., min_length=1)
    fornitore: str = Field(..., min_length=1)
    data_ora: datetime
    data_ora_fine: datetime | None = None
    numero_persone: int | None = Field(default=None, gt=0)


class PrenotazioneUpdateIn(BaseModel):
    # tutti opzionali: si aggiornano solo i campi inviati
    utente: str | None = Field(default=None, min_length=1)
    fornitore: str | None = Field(default=None, min_length=1)
    data_ora: datetime | None = None
    data_ora_fine: datetime | None = None
    numero_persone: int | None = Field(default=None, gt=0)

    model_config = {"extra": "forbid"}



# Endpoints

@app.get("/api/health")
def health() -> dict[str, Any]:
    return {"ok": True, "iscritti_realtime": feed.numero_iscritti}


@app.get("/api/sale")
def api_sale() -> list[dict]:
    return lista_sale_flat()


@app.get("/api/prenotazioni")
def api_prenotazioni(sala: str = Query(..., min_length=1)) -> list[dict]:
    return lista_prenotazioni_flat(sala)


@app.get("/api/prenotazioni/{prenotazione_id}")
def api_prenotazione(prenotazione_id: str) -> dict[str, Any]:
    row = get_prenotazione_flat(prenotazione_id)
    if not row:
        raise HTTPException(status_code=404, detail="Prenotazione non trovata")
    return row


@app.post("/api/prenotazioni", status_code=status.HTTP_201_CREATED)
def api_crea_prenotazione(payload: PrenotazioneCreateIn) -> dict[str, Any]:
    try:
        return crea_prenotazione(
            sala=payload.sala,
            utente=payload.utente,
            fornitore=payload.fornitore,
            data_ora=payload.data_ora,
            data_ora_fine=payload.data_ora_fine,
            numero_persone=payload.numero_persone,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.patch("/api/prenotazioni/{prenotazione_id}")
def api_aggiorna_prenotazione(prenotazione_id: str, payload: PrenotazioneUpdateIn) -> dict[str, Any]:
    campi = payload.model_dump(exclude_unset=True)
    try:
        row = aggiorna_prenotazione(prenotazione_id, campi)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not row:
        raise HTTPException(status_code=404, detail="Prenotazione non trovata")
    return row


@app.delete("/api/prenotazioni/{prenotazione_id}")
def api_elimina_prenotazione(prenotazione_id: str) -> dict[str, Any]:
    # eliminare una riga già rimossa non è un errore
    return {"ok": True, "eliminata": elimina_prenotazione(prenotazione_id)}


@app.get("/api/realtime/prenotazioni")
def api_realtime() -> StreamingResponse:
    """Stream SSE di tutte le modifiche alla tabella, non filtrato per sala."""
    iscr = feed.iscrivi()
    return StreamingResponse(
        stream_sse(iscr),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
