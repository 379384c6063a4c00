"""CLI entry point.

This script refreshes the cached Workable vacancies and optionally writes them
to a JSON file.

Examples:
    python run_refresh.py --subdomain acme --token XXX --out vacancies.json
    python run_refresh.py --cache-file cache.json --watch

Credentials default to WORKABLE_SUBDOMAIN / WORKABLE_ACCESS_TOKEN (a `.env`
file is read too).
"""

from __future__ import annotations

import argparse
import json
import logging
import threading
from pathlib import Path

from vacancy_engine import config
from vacancy_engine.cache import JsonFileCacheStore
from vacancy_engine.models import dump_collection
from vacancy_engine.refresh import IntervalScheduler, WorkableVacancies


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch, enrich and cache published Workable vacancies.")
    p.add_argument("--subdomain", type=str, default=config.WORKABLE_SUBDOMAIN, help="Workable account subdomain.")
    p.add_argument("--token", type=str, default=config.WORKABLE_ACCESS_TOKEN, help="Workable API access token.")
    p.add_argument("--cache-file", type=str, default=config.WORKABLE_CACHE_FILE, help="JSON cache file path.")
    p.add_argument("--out", type=str, default=None, help="Also write the vacancies to this JSON file.")
    p.add_argument("--watch", action="store_true", help="Keep running and refresh every hour.")
    p.add_argument("--log-level", type=str, default="INFO", help="Logging level (DEBUG, INFO, ...).")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    store = JsonFileCacheStore(Path(args.cache_file))
    scheduler = IntervalScheduler()
    vacancies = WorkableVacancies(args.subdomain, args.token, store=store, scheduler=scheduler)
    if not vacancies.active:
        raise SystemExit("Set WORKABLE_SUBDOMAIN and WORKABLE_ACCESS_TOKEN (or pass --subdomain/--token).")

    with vacancies:
        if args.watch:
            vacancies.initiate_schedule()
            print(f"Refreshing every {config.REFRESH_INTERVAL_S}s into {store.path}; Ctrl+C to stop.")
            try:
                threading.Event().wait()
            except KeyboardInterrupt:
                scheduler.shutdown()
            return

        ok = vacancies.refresh()
        data = dump_collection(vacancies.cache.read_cached() or [])
        print(f"Refresh {'succeeded' if ok else 'failed'}; {len(data)} vacancies cached in {store.path}")

        if args.out:
            out_path = Path(args.out).expanduser().resolve()
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            print(f"Wrote {len(data)} vacancies to: {out_path}")


if __name__ == "__main__":
    main()
