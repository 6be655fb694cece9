import argparse
import asyncio
import json
import signal
from typing import Any

from loguru import logger

from gateway_client.app.composition import create_database_api
from gateway_client.app.config.settings import Settings
from gateway_client.app.core import SERVICE_NAME


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="gateway-client", description="Talk to a SQL gateway.")
    sub = parser.add_subparsers(dest="command", required=True)

    query = sub.add_parser("query", help="Run one SQL statement and print the result as JSON.")
    query.add_argument("text")
    query.add_argument("--params", default=None, help="JSON array of positional parameters.")

    sub.add_parser("test", help="Poll the health endpoint once.")
    sub.add_parser("watch", help="Log connectivity changes until interrupted.")
    return parser.parse_args(argv)


async def run_query(text: str, params: list[Any] | None) -> None:
    api = create_database_api(Settings())
    try:
        result = await api.query(text, params)
        print(json.dumps({"rows": result.rows, "rowCount": result.row_count}, default=str, indent=2))
    finally:
        await api.cleanup()


async def run_test() -> None:
    api = create_database_api(Settings())
    try:
        result = await api.test_connection()
        print(json.dumps({"isConnected": result.is_connected, "details": result.details}, default=str, indent=2))
    finally:
        await api.cleanup()


async def run_watch() -> None:
    api = create_database_api(Settings())
    shutdown = asyncio.Event()

    def request_shutdown() -> None:
        if not shutdown.is_set():
            _log("shutdown_signal")
            shutdown.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_shutdown)
        except NotImplementedError:
            pass

    unsubscribe = api.on_connection_change(lambda connected: _log("gateway_connectivity", connected=connected))
    await api.start()
    _log("watch_started")
    try:
        await shutdown.wait()
    finally:
        unsubscribe()
        await api.cleanup()
        _log("watch_stopped")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    try:
        if args.command == "query":
            params = json.loads(args.params) if args.params else None
            asyncio.run(run_query(args.text, params))
        elif args.command == "test":
            asyncio.run(run_test())
        else:
            asyncio.run(run_watch())
    except KeyboardInterrupt:
        _log("client_interrupted")
    except Exception as e:
        logger.exception("client failed: {}", e)
        raise


if __name__ == "__main__":
    main()
