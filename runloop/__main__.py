from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from runloop.clock import MonotonicClock, SimClock
from runloop.config import LoopConfig
from runloop.scheduler import Scheduler


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records from the library into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    # loguru numbers its levels on the stdlib scale (TRACE=5, SUCCESS=25)
    threshold = logger.level(level.upper()).no
    library_logger = logging.getLogger("runloop")
    library_logger.handlers = [h for h in library_logger.handlers if not isinstance(h, InterceptHandler)]
    library_logger.addHandler(InterceptHandler())
    library_logger.setLevel(threshold)


@dataclass
class DemoTrace:
    lines: list[str] = field(default_factory=list)

    def emit(self, line: str) -> None:
        self.lines.append(line)


def run_demo(scheduler: Scheduler, *, delay_ms: float, trace: DemoTrace) -> DemoTrace:
    """Seed and run the two-timers-plus-microtask scenario.

    Expected order: Start, End, Microtask 1, Timeout 1,
    Microtask from Timeout 1, Timeout 2.
    """
    clock = scheduler.clock
    trace.emit("Start")

    t1 = clock.now()

    def timeout_1() -> None:
        trace.emit(f"Timeout 1 {clock.now() - t1:.0f}")
        scheduler.queue_microtask(lambda: trace.emit("Microtask from Timeout 1"), name="from timeout 1")

    scheduler.schedule_after(timeout_1, delay_ms, name="timeout 1")

    t2 = clock.now()
    scheduler.schedule_after(lambda: trace.emit(f"Timeout 2 {clock.now() - t2:.0f}"), delay_ms, name="timeout 2")

    scheduler.queue_microtask(lambda: trace.emit("Microtask 1"), name="microtask 1")
    trace.emit("End")

    scheduler.run()
    logger.info("Event loop finished after {} task(s)", scheduler.executed)
    return trace


def handle_demo(args: argparse.Namespace) -> int:
    clock = SimClock() if args.simulated else MonotonicClock()
    config = LoopConfig.from_env()
    scheduler = Scheduler(clock, config=config)
    logger.debug("demo clock={} delay_ms={}", type(clock).__name__, args.delay_ms)
    trace = run_demo(scheduler, delay_ms=args.delay_ms, trace=DemoTrace())
    if args.format == "json":
        print(json.dumps({"status": "ok", "events": trace.lines, "executed": scheduler.executed}))
    else:
        for line in trace.lines:
            print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="runloop", description="Deterministic microtask/macrotask/timer event loop")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Diagnostic log level written to stderr (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo_parser = subparsers.add_parser(
        "demo",
        help="Run the two-timers-plus-microtask scenario",
        description=(
            "Queue two timers with the same delay and one microtask, then run the loop.\n\n"
            "Examples:\n"
            "  runloop demo\n"
            "  runloop demo --simulated --format json\n"
            "  RUNLOOP_PROFILE=1 runloop --log-level debug demo --delay-ms 50"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    demo_parser.add_argument(
        "--delay-ms",
        type=float,
        default=1000.0,
        help="Delay of both timers in milliseconds (default: 1000)",
    )
    demo_parser.add_argument(
        "--simulated",
        action="store_true",
        help="Use a virtual clock that jumps to the next timer instead of sleeping",
    )
    demo_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    demo_parser.set_defaults(func=handle_demo)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        configure_logging(args.log_level)
        return args.func(args)
    except Exception as exc:
        if getattr(args, "format", "text") == "json":
            payload = {
                "status": "error",
                "error": exc.__class__.__name__,
                "message": str(exc),
            }
            print(json.dumps(payload))
        else:
            print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
