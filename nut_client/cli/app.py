"""Command-line NUT client: list, fetch or watch UPS variables."""

import argparse
import logging
import os
import sys
import time

from nut_client.core.nut_manager import NUTManager
from nut_client.protocol.constants import TIMEOUT
from nut_client.protocol.errors import NUTError
from nut_client.protocol.nut_protocol import open_session
from nut_client.util.status_decoder import active_flags, unknown_flags

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nut-client",
        description="Query UPS variables from a NUT upsd server")
    parser.add_argument("address", help="upsd host[:port] (default port: 3493)")
    parser.add_argument("--ups", help="UPS identifier (default: auto-detect)")
    parser.add_argument("--username", default=os.environ.get("NUT_USERNAME"),
                        help="login user (default: $NUT_USERNAME)")
    parser.add_argument("--password", default=os.environ.get("NUT_PASSWORD"),
                        help="login password (default: $NUT_PASSWORD)")
    parser.add_argument("--plain-ok", action="store_true",
                        help="end the login on one plain OK per command "
                             "instead of waiting for OK LOGGED")
    parser.add_argument("--get", action="append", metavar="NAME", default=[],
                        help="print a single variable (repeatable)")
    parser.add_argument("--list-ups", action="store_true",
                        help="print the UPS units known to the server")
    parser.add_argument("--watch", type=float, metavar="SECONDS",
                        help="poll every SECONDS and print values that change")
    parser.add_argument("--timeout", type=float, default=TIMEOUT,
                        help=f"stream read timeout in seconds (default: {TIMEOUT})")
    parser.add_argument("--verbose", action="store_true",
                        help="enable verbose (DEBUG) logging")
    return parser


def print_variables(values: dict[str, str], out=sys.stdout) -> None:
    """Print ``name: value`` lines sorted by name, then the decoded status."""
    for name in sorted(values):
        print(f"{name}: {values[name]}", file=out)
    status = values.get("ups.status")
    if status:
        flags = active_flags(status) + unknown_flags(status)
        print(f"status flags: {', '.join(flags)}", file=out)


def _run_once(args: argparse.Namespace, out) -> int:
    with open_session(args.address, timeout=args.timeout) as session:
        if args.username:
            session.authenticate(args.username, args.password or "",
                                 plain_ok=args.plain_ok)

        if args.list_ups:
            for ups_id, description in session.list_ups().items():
                print(f"{ups_id}: {description}", file=out)
            return 0

        if args.ups:
            session.set_identifier(args.ups)
        else:
            session.identify()

        if args.get:
            for name in args.get:
                print(f"{name}: {session.get_var(name)}", file=out)
            return 0

        session.list_var()
        print_variables(session.store.snapshot(), out=out)
    return 0


def _watch(args: argparse.Namespace, out) -> int:
    manager = NUTManager(timeout=args.timeout)
    manager.set_io_logging(args.verbose)
    if not manager.connect(args.address, args.username, args.password, args.ups,
                           plain_ok=args.plain_ok):
        print(f"error: {manager.last_error}", file=sys.stderr)
        return 1

    previous = manager.store.snapshot()
    print_variables(previous, out=out)
    manager.start_polling(args.watch)
    try:
        while True:
            time.sleep(args.watch)
            current = manager.store.snapshot()
            for name in sorted(current):
                if previous.get(name) != current[name]:
                    print(f"{name}: {current[name]}", file=out)
            previous = current
    except KeyboardInterrupt:
        pass
    finally:
        manager.disconnect()
    return 0


def main(argv: list[str] | None = None, out=None) -> int:
    """Application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    out = out or sys.stdout

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")

    if args.watch is not None and args.watch <= 0:
        parser.error("--watch needs a positive interval")

    if args.watch is not None:
        return _watch(args, out)
    try:
        return _run_once(args, out)
    except (NUTError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
