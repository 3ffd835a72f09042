from __future__ import annotations

import argparse
import json
import time

from backend.client import RepositoryPrenotazioni
from backend.config import API_BASE, configura_logging
from backend.errors import ErrorePrenotazioni
from backend.realtime import NotificaModifica
from backend.sale import SALE
from backend.seed import seed_demo
from backend.services import init_db


def cmd_init(args: argparse.Namespace) -> None:
    init_db()
    print("DB inizializzato.")


def cmd_seed(args: argparse.Namespace) -> None:
    init_db()
    n = seed_demo()
    print(f"Seed completato: {n} prenotazioni inserite.")


def cmd_sale(args: argparse.Namespace) -> None:
    for s in SALE:
        print(f"{s.nome} | {s.colore} | {s.immagine}")


# I comandi seguenti passano dall'API, così i client iscritti ricevono le notifiche realtime

def cmd_lista(args: argparse.Namespace) -> None:
    rows = RepositoryPrenotazioni(base_url=args.api).lista(args.sala)
    if not rows:
        print("Nessuna prenotazione.")
        return
    for r in rows:
        persone = r.get("numero_persone") or "-"
        print(f"{r['id']} | {r['data_ora']} -> {r.get('data_ora_fine') or '?'} | {r['utente']} | {r['fornitore']} | {persone}")


def cmd_prenota(args: argparse.Namespace) -> None:
    row = RepositoryPrenotazioni(base_url=args.api).crea(
        sala=args.sala,
        utente=args.utente,
        fornitore=args.fornitore,
        numero_persone=args.persone,
        data_ora=args.inizio,
        data_ora_fine=args.fine,
    )
    print(f"Prenotazione creata: {row['id']}")


def cmd_modifica(args: argparse.Namespace) -> None:
    campi = {
        k: v
        for k, v in {
            "utente": args.utente,
            "fornitore": args.fornitore,
            "data_ora": args.inizio,
            "data_ora_fine": args.fine,
            "numero_persone": args.persone,
        }.items()
        if v is not None
    }
    if args.senza_fine:
        campi["data_ora_fine"] = None
    RepositoryPrenotazioni(base_url=args.api).aggiorna(args.id, campi)
    print("Aggiornata.")


def cmd_elimina(args: argparse.Namespace) -> None:
    ok = RepositoryPrenotazioni(base_url=args.api).elimina(args.id)
    print("Eliminata." if ok else "Non trovata / già eliminata.")


def cmd_ascolta(args: argparse.Namespace) -> None:
    """
    Stampa le notifiche realtime finché non si preme Ctrl+C.
    """
    def stampa(n: NotificaModifica) -> None:
        print(json.dumps(n.to_dict(), ensure_ascii=False), flush=True)

    with RepositoryPrenotazioni(base_url=args.api).canale(stampa):
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sale_riunioni_cli", description="CLI Sale Riunioni (prenotazioni)")
    p.add_argument("--api", default=API_BASE, help="Indirizzo dell'API prenotazioni")
    sub = p.add_subparsers(required=True)

    p_init = sub.add_parser("init", help="Crea DB")
    p_init.set_defaults(func=cmd_init)

    p_seed = sub.add_parser("seed", help="Inserisce prenotazioni dimostrative nella settimana corrente")
    p_seed.set_defaults(func=cmd_seed)

    p_sale = sub.add_parser("sale", help="Catalogo sale")
    p_sale.set_defaults(func=cmd_sale)

    p_lista = sub.add_parser("lista", help="Prenotazioni di una sala")
    p_lista.add_argument("--sala", required=True)
    p_lista.set_defaults(func=cmd_lista)

    p_pren = sub.add_parser("prenota", help="Crea prenotazione")
    p_pren.add_argument("--sala", required=True)
    p_pren.add_argument("--utente", required=True)
    p_pren.add_argument("--fornitore", required=True)
    p_pren.add_argument("--persone", type=int, default=None)
    p_pren.add_argument("--inizio", required=True, help="ISO datetime es: 2026-01-14T10:30Z")
    p_pren.add_argument("--fine", default=None)
    p_pren.set_defaults(func=cmd_prenota)

    p_mod = sub.add_parser("modifica", help="Aggiorna prenotazione (solo i campi indicati)")
    p_mod.add_argument("--id", required=True)
    p_mod.add_argument("--utente", default=None)
    p_mod.add_argument("--fornitore", default=None)
    p_mod.add_argument("--persone", type=int, default=None)
    p_mod.add_argument("--inizio", default=None)
    p_mod.add_argument("--fine", default=None)
    p_mod.add_argument("--senza-fine", action="store_true", help="Rimuove l'orario di fine")
    p_mod.set_defaults(func=cmd_modifica)

    p_del = sub.add_parser("elimina", help="Elimina prenotazione")
    p_del.add_argument("--id", required=True)
    p_del.set_defaults(func=cmd_elimina)

    p_asc = sub.add_parser("ascolta", help="Stampa le notifiche realtime dell'API")
    p_asc.set_defaults(func=cmd_ascolta)

    return p


def main(argv: list[str] | None = None) -> None:
    configura_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ErrorePrenotazioni as e:
        raise SystemExit(f"ERRORE: {e.messaggio} ({e})")


if __name__ == "__main__":
    main()
