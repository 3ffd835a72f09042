"""
Backend applicativo Sale Riunioni.

Struttura:
- config.py     : variabili d'ambiente (.env) e logging
- db.py         : engine e sessioni SQLAlchemy
- models.py     : modello ORM Prenotazione
- sale.py       : catalogo sale (nome, colore, immagine)
- services.py   : CRUD prenotazioni + pubblicazione modifiche
- realtime.py   : feed modifiche (SSE) lato server e canale lato client
- api_main.py   : API REST FastAPI
- client.py     : repository HTTP usato da UI e CLI
- moduli.py     : validazione dei moduli di prenotazione
- calendario.py : stato calendario di una sala e riconciliazione eventi
- vista.py      : griglie mese / settimana / giorno
- seed.py       : prenotazioni dimostrative
- cli.py        : operazioni da riga di comando
"""
