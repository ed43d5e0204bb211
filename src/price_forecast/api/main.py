"""Console entry point serving the forecast API with uvicorn."""

from __future__ import annotations

import argparse
import os

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the dual-model forecast API.")
    parser.add_argument("--host", default=os.getenv("API_HOST", "127.0.0.1"), help="Bind address.")
    parser.add_argument("--port", type=int, default=int(os.getenv("API_PORT", "8000")), help="Bind port.")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development).")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    uvicorn.run("price_forecast.api.server:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
