from __future__ import annotations

import logging
from datetime import date, time, timedelta
from pathlib import Path

import streamlit as st

from backend.calendario import SessioneSala
from backend.client import RepositoryPrenotazioni
from backend.config import API_BASE, configura_logging
from backend.orari import a_utc
from backend.sale import SALE, get_sala, link_sala
from backend.vista import (
    MESE,
    SLOT_MAX,
    SLOT_MIN,
    VISTA_INIZIALE,
    VISTE,
    griglia,
    selezione_intervallo,
    sposta,
    titolo_vista,
)

st.set_page_config(page_title="Sale Riunioni", layout="wide")
configura_logging()
logger = logging.getLogger("streamlit_app")

# ogni quanto la griglia rilegge la lista eventi aggiornata dal canale realtime
REFRESH_SECONDI = 3



# Sessione calendario (una per sala visualizzata)

def get_repository() -> RepositoryPrenotazioni:
    if "repository" not in st.session_state:
        st.session_state["repository"] = RepositoryPrenotazioni(base_url=API_BASE)
    return st.session_state["repository"]


def chiudi_sessione() -> None:
    sessione: SessioneSala | None = st.session_state.pop("sessione", None)
    if sessione is not None:
        sessione.chiudi()
        logger.info("Sessione calendario %s chiusa", sessione.sala)


def sessione_corrente(sala: str) -> SessioneSala:
    sessione: SessioneSala | None = st.session_state.get("sessione")
    if sessione is not None and sessione.sala == sala:
        return sessione

    # cambio sala: chiude l'iscrizione realtime della sala precedente
    chiudi_sessione()
    sessione = SessioneSala(sala, get_repository()).apri()
    st.session_state["sessione"] = sessione
    return sessione


def vai_a_elenco() -> None:
    chiudi_sessione()
    st.query_params.clear()



# Sidebar

with st.sidebar:
    st.header("Sale")
    for s in SALE:
        st.markdown(f"- [{s.nome}]({link_sala(s.nome)})")
    st.divider()
    st.caption(f"API: {API_BASE}")



# Vista elenco (scelta sala)

def pagina_elenco() -> None:
    chiudi_sessione()
    st.title("Seleziona una Sala Riunioni")

    cols = st.columns(len(SALE))
    for col, sala in zip(cols, SALE):
        with col:
            if Path(sala.immagine).exists():
                st.image(sala.immagine, use_container_width=True)
            st.markdown(
                f"<a href='{link_sala(sala.nome)}' target='_self' style='display:block;text-align:center;"
                f"padding:2rem;border-radius:1rem;background:{sala.colore};color:white;"
                f"font-size:1.5rem;font-weight:bold;text-decoration:none'>{sala.nome}</a>",
                unsafe_allow_html=True,
            )



# Vista calendario di una sala

def _barra_navigazione() -> tuple[str, date]:
    vista = st.session_state.setdefault("vista", VISTA_INIZIALE)
    riferimento = st.session_state.setdefault("riferimento", date.today())

    c1, c2, c3, c4, c5 = st.columns([1, 1, 1, 4, 3])
    if c1.button("◀", key="nav_prev"):
        st.session_state["riferimento"] = sposta(vista, riferimento, -1)
        st.rerun()
    if c2.button("▶", key="nav_next"):
        st.session_state["riferimento"] = sposta(vista, riferimento, 1)
        st.rerun()
    if c3.button("Oggi", key="nav_oggi"):
        st.session_state["riferimento"] = date.today()
        st.rerun()
    c4.markdown(f"### {titolo_vista(vista, riferimento)}")
    scelta = c5.radio(
        "Vista",
        options=list(VISTE),
        format_func=lambda v: VISTE[v],
        index=list(VISTE).index(vista),
        horizontal=True,
        label_visibility="collapsed",
        key="nav_vista",
    )
    if scelta != vista:
        st.session_state["vista"] = scelta
        st.rerun()
    return vista, riferimento


@st.fragment(run_every=REFRESH_SECONDI)
def _griglia(sessione: SessioneSala, vista: str, riferimento: date) -> None:
    df = griglia(vista, sessione.events, riferimento)
    altezza = 420 if vista == MESE else 35 * (len(df) + 1)
    st.dataframe(df, use_container_width=True, height=altezza)


def _banner(sessione: SessioneSala) -> None:
    if sessione.errore:
        c1, c2 = st.columns([12, 1])
        c1.error(sessione.errore)
        if c2.button("✕", key="chiudi_errore"):
            sessione.chiudi_errore()
            st.rerun()
    if sessione.loading:
        st.info("Caricamento in corso...")


def _modulo_nuova(sessione: SessioneSala, riferimento: date) -> None:
    with st.expander("➕ Nuova prenotazione", expanded=False):
        with st.form("nuova_prenotazione", clear_on_submit=True):
            c1, c2, c3 = st.columns(3)
            giorno = c1.date_input("Giorno", value=riferimento, key="new_giorno")
            ora_inizio = c2.time_input("Dalle", value=time(9, 0), step=timedelta(minutes=30), key="new_inizio")
            ora_fine = c3.time_input("Alle", value=time(10, 0), step=timedelta(minutes=30), key="new_fine")
            c4, c5, c6 = st.columns(3)
            utente = c4.text_input("Nome utente", key="new_utente")
            fornitore = c5.text_input("Nome fornitore", key="new_fornitore")
            persone = c6.number_input("Numero persone", min_value=1, step=1, value=1, key="new_persone")
            inviato = st.form_submit_button("Prenota", disabled=sessione.loading)

        if inviato:
            inizio, fine = selezione_intervallo(giorno, ora_inizio, ora_fine)
            if sessione.crea(utente, fornitore, int(persone), inizio, fine):
                st.success("Prenotazione creata.")
            st.rerun()


def _dettaglio(sessione: SessioneSala) -> None:
    eventi = sessione.events
    if not eventi:
        st.info("Nessuna prenotazione per questa sala.")
        return

    c1, c2 = st.columns([4, 1])
    scelto = c1.selectbox(
        "Prenotazione",
        options=[e.id for e in eventi],
        format_func=lambda i: next((f"{a_utc(e.start):%d/%m %H:%M} · {e.title}" for e in eventi if e.id == i), i),
        key="dettaglio_scelta",
    )
    if c2.button("Apri", key="dettaglio_apri"):
        sessione.seleziona(scelto)
        st.rerun()

    ev = sessione.selezionato
    if ev is None:
        return

    inizio = a_utc(ev.start)
    fine = a_utc(ev.end) if ev.end else None

    st.subheader("Dettagli Prenotazione")
    st.write(f"**Utente:** {ev.utente}")
    st.write(f"**Fornitore:** {ev.fornitore}")
    st.write(f"**Numero persone:** {ev.numero_persone if ev.numero_persone is not None else '-'}")
    st.write(f"**Data e Ora Inizio:** {inizio:%d/%m/%Y %H:%M}")
    st.write(f"**Data e Ora Fine:** {f'{fine:%d/%m/%Y %H:%M}' if fine else 'Non specificata'}")

    with st.form("modifica_prenotazione"):
        c1, c2, c3 = st.columns(3)
        utente = c1.text_input("Nome utente", value=ev.utente)
        fornitore = c2.text_input("Nome fornitore", value=ev.fornitore)
        persone = c3.number_input("Numero persone", min_value=1, step=1, value=ev.numero_persone or 1)
        c4, c5, c6 = st.columns(3)
        giorno = c4.date_input("Giorno", value=inizio.date())
        ora_inizio = c5.time_input("Dalle", value=inizio.time(), step=timedelta(minutes=30))
        ora_fine = c6.time_input("Alle", value=fine.time() if fine else None, step=timedelta(minutes=30))
        salva = st.form_submit_button("Modifica Prenotazione", disabled=sessione.loading)

    if salva:
        nuovo_inizio, nuova_fine = selezione_intervallo(giorno, ora_inizio, ora_fine)
        if sessione.aggiorna(utente, fornitore, int(persone), nuovo_inizio, nuova_fine):
            st.success("Prenotazione aggiornata.")
        st.rerun()

    b1, b2 = st.columns(2)
    if b1.button("Elimina Prenotazione", type="primary", disabled=sessione.loading, key="dettaglio_elimina"):
        sessione.elimina(ev.id)
        st.rerun()
    if b2.button("Chiudi", disabled=sessione.loading, key="dettaglio_chiudi"):
        sessione.chiudi_dettaglio()
        st.rerun()


def pagina_sala(sala: str) -> None:
    if st.button("← Tutte le sale", key="torna_elenco"):
        vai_a_elenco()
        st.rerun()

    sessione = sessione_corrente(sala)
    st.title(f"Calendario: {sala}")
    st.caption(f"Orari UTC, {SLOT_MIN:%H:%M}–{SLOT_MAX:%H:%M}. Aggiornamento in tempo reale attivo.")

    _banner(sessione)
    vista, riferimento = _barra_navigazione()
    _griglia(sessione, vista, riferimento)

    st.divider()
    _modulo_nuova(sessione, riferimento)
    _dettaglio(sessione)



# Routing

sala_param = st.query_params.get("sala")
if sala_param and get_sala(sala_param):
    pagina_sala(sala_param)
else:
    if sala_param:
        st.warning(f"Sala sconosciuta: {sala_param}")
    pagina_elenco()
