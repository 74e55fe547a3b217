#!/usr/bin/env python3
"""
Launch the Safety-Aware Routing API under uvicorn.

Incident sources are passed to the app through environment variables,
which `api.services.routing_service.build_routing_service` reads on first use.
"""

import argparse
import os

import uvicorn

SOURCE_ENV = {
    'reports_db': "SAFE_ROUTING_REPORTS_DB",
    'reports_file': "SAFE_ROUTING_REPORTS_FILE",
    'news_file': "SAFE_ROUTING_NEWS_FILE",
    'osrm_url': "SAFE_ROUTING_OSRM_URL",
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Safety-Aware Routing API server")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to listen on")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"],
                        help="uvicorn log level")
    parser.add_argument("--reports-db", help="SQLite database with the reports table")
    parser.add_argument("--reports-file", help="JSON/GeoJSON incident reports (when no database)")
    parser.add_argument("--news-file", help="JSON/GeoJSON news incidents")
    parser.add_argument("--osrm-url", help="OSRM server base URL")
    return parser.parse_args(argv)


def export_sources(args: argparse.Namespace) -> None:
    for option, variable in SOURCE_ENV.items():
        value = getattr(args, option)
        if value:
            os.environ[variable] = os.path.abspath(value) if option != 'osrm_url' else value


def main(argv=None):
    args = parse_args(argv)
    export_sources(args)

    base = f"http://{args.host}:{args.port}"
    print("🚀 Safety-Aware Routing API")
    print(f"   API docs:      {base}/docs")
    print(f"   Rank routes:   POST {base}/api/routing/rank")
    print(f"   Service state: {base}/api/routing/health")

    # uvicorn imports the app by module path, so run from the project root
    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    uvicorn.run("api.main:app", host=args.host, port=args.port,
                reload=args.reload, log_level=args.log_level)


if __name__ == "__main__":
    main()
