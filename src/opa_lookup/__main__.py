import argparse
import json
import os
import sys

from .api.schemas import search_payload, suggestion_payload
from .backends import get_query_service
from .config import get_settings, reset_settings_cache
from .engine.common import clamp_limit
from .engine.resolver import resolve
from .engine.suggest import DEFAULT_LIMIT, suggest
from .errors import InvalidInput, OpaLookupError
from .log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="OPA property lookup CLI",
    )
    parser.add_argument(
        "--address",
        default=None,
        help="Street address to resolve, e.g. '1234 Market St 19107'",
    )
    parser.add_argument(
        "--opa",
        default=None,
        help="OPA parcel number to look up (6-12 digits)",
    )
    parser.add_argument(
        "--suggest",
        default=None,
        help="Partial address to list candidate matches for",
    )
    parser.add_argument(
        "--limit",
        default=None,
        help="Maximum number of results (1-25)",
    )
    parser.add_argument(
        "--backend",
        choices=["sqlite", "carto"],
        default=None,
        help="Query backend (overrides OPA_BACKEND)",
    )
    parser.add_argument(
        "--db",
        default=None,
        help="SQLite database path (overrides OPA_SQLITE_PATH)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, etc.)",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP API instead of a one-off lookup",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind host for --serve")
    parser.add_argument("--port", type=int, default=8000, help="Bind port for --serve")
    return parser


def _emit(payload: dict) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.backend:
        os.environ["OPA_BACKEND"] = args.backend
    if args.db:
        os.environ["OPA_SQLITE_PATH"] = args.db
    reset_settings_cache()
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    if args.serve:
        import uvicorn

        uvicorn.run("opa_lookup.api.app:app", host=args.host, port=args.port)
        return 0

    if not (args.address or args.opa or args.suggest):
        parser.error("one of --address, --opa, --suggest or --serve is required")

    try:
        service = get_query_service(settings)
        try:
            if args.suggest:
                lim = clamp_limit(args.limit, DEFAULT_LIMIT)
                found = suggest(service, args.suggest, lim, settings)
                _emit(
                    {
                        "ok": True,
                        "query": args.suggest,
                        "count": len(found),
                        "suggestions": [suggestion_payload(s) for s in found],
                    }
                )
                return 0
            lim = clamp_limit(args.limit, 1)
            resolution = resolve(service, opa=args.opa, address=args.address, limit=lim, settings=settings)
            _emit(search_payload(resolution, settings, lim))
            return 0
        finally:
            service.close()
    except OpaLookupError as exc:
        _emit(exc.to_dict())
        return 2 if isinstance(exc, InvalidInput) else 1
    except KeyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
