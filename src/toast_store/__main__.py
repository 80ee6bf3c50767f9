from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
import threading

from jsonschema import ValidationError

from . import __version__
from .config import load_config
from .models import ToastState
from .store import ToastStore


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="toast-store",
        description="Raise toasts against an in-memory store and print every state snapshot as JSON",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("messages", nargs="*", help="Toast titles; append ':variant' to set a variant")
    parser.add_argument("--config", default=None, help="YAML file with capacity / remove_delay_ms")
    parser.add_argument("--capacity", type=int, default=None, help="Override the store capacity")
    parser.add_argument("--remove-delay-ms", type=float, default=None, help="Override the removal delay")
    parser.add_argument("--dismiss-all", action="store_true", help="Dismiss every toast after creating them")
    parser.add_argument("--timeout", type=float, default=10.0, help="Seconds to wait for pending removals")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = load_config(args.config)
        overrides = {}
        if args.capacity is not None:
            overrides["capacity"] = args.capacity
        if args.remove_delay_ms is not None:
            overrides["remove_delay_ms"] = args.remove_delay_ms
        if overrides:
            config = dataclasses.replace(config, **overrides)
    except (OSError, ValueError, ValidationError) as exc:
        print(f"toast-store: invalid configuration: {exc}", file=sys.stderr)
        return 2

    store = ToastStore(config)
    drained = threading.Event()

    def print_state(state: ToastState) -> None:
        print(json.dumps([t.as_dict() for t in state.toasts], default=str), flush=True)
        if not state.toasts:
            drained.set()

    store.subscribe(print_state)

    for raw in args.messages:
        title, _, variant = raw.partition(":")
        store.create(title=title, variant=variant or "default")
    if not (args.dismiss_all and args.messages):
        return 0

    drained.clear()
    store.dismiss_all()
    if not drained.wait(max(0.0, args.timeout)):
        print("toast-store: timed out waiting for dismissed toasts to be removed", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
