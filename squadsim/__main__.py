"""Entry point: ``python -m squadsim``.

Supports two modes:
  - ``python -m squadsim run``    → Headless batch of battles (default)
  - ``python -m squadsim serve``  → Launch the FastAPI server
"""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic squad combat simulator")
    sub = parser.add_subparsers(dest="command")

    # --- Headless batch mode (default) ---
    run = sub.add_parser("run", help="Run squad matchups and print a summary (default)")
    run.add_argument("--mode", type=str, default="quick", choices=["quick", "predefined"])
    run.add_argument("--battles", type=int, default=100)
    run.add_argument("--scenario", type=str, default=None, help="Composition name for predefined mode")
    run.add_argument("--seed", type=int, default=42)
    run.add_argument("--no-entropy", action="store_true", help="Disable random walls and spawn jitter")
    run.add_argument("--record", type=str, nargs="?", const="battle-recording.json", default=None,
                     help="Save one battle's frames to FILE")
    run.add_argument("--max-ticks", type=int, default=1000)
    run.add_argument("--workers", type=int, default=1)
    run.add_argument("--log-level", type=str, default="INFO", choices=LOG_LEVELS)

    # --- Server mode ---
    srv = sub.add_parser("serve", help="Start the FastAPI server")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--workers", type=int, default=1)
    srv.add_argument("--log-level", type=str, default="INFO", choices=LOG_LEVELS)

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from squadsim.api.app import create_app
    from squadsim.config import SimulationConfig

    config = SimulationConfig(seed=args.seed, num_workers=args.workers, log_level=args.log_level)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _log_report(report) -> None:
    batch = report.batch
    n = batch.iterations
    summary = batch.summary()
    logger.info("--- %s ---", report.label)
    logger.info("Friendly energy: %d | Enemy energy: %d", report.friendly_cost, report.enemy_cost)
    logger.info("Results over %d battles:", n)
    logger.info("  Wins: %d (%.1f%%)", batch.wins, batch.win_rate * 100)
    logger.info("  Losses: %d (%.1f%%)", batch.losses, batch.losses / n * 100)
    logger.info("  Draws: %d (%.1f%%)", batch.draws, batch.draws / n * 100)
    logger.info("  Avg duration: %.1f ticks", batch.avg_ticks)
    for side in ("friendly", "enemy"):
        s = summary[side]
        logger.info(
            "  %s avg damage: %.1f | avg healing: %.1f | avg survivors: %.1f",
            side.capitalize(), s["avgDamage"], s["avgHealing"], s["avgSurvivors"],
        )


def _run_batch(args: argparse.Namespace) -> int:
    from squadsim.config import SimulationConfig
    from squadsim.engine.matchups import predefined_matchups, quick_matchups
    from squadsim.utils.logging import setup_logging
    from squadsim.utils.replay import save_recording

    config = SimulationConfig(
        seed=args.seed,
        max_ticks=args.max_ticks,
        entropy=not args.no_entropy,
        record_battle=args.record is not None,
        num_workers=args.workers,
        log_level=args.log_level,
        replay_file=args.record or "battle-recording.json",
    )
    setup_logging(config.log_level, quiet=("squadsim.engine.combat_engine",))

    record = config.record_battle
    try:
        if args.mode == "predefined":
            if not args.scenario:
                logger.error("--scenario is required for predefined mode")
                return 1
            logger.info("=== PREDEFINED SCENARIO: %s ===", args.scenario)
            reports = predefined_matchups(config, args.scenario, args.battles, record=record)
        else:
            logger.info("=== QUICK TEST MODE ===")
            reports = quick_matchups(config, record=record)
    except (KeyError, ValueError) as exc:
        logger.error("%s", exc.args[0] if exc.args else exc)
        return 1

    for report in reports:
        _log_report(report)

    if record:
        recording = next((r.recording for r in reports if r.recording is not None), None)
        save_recording(recording, config.replay_file)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Default to batch mode if no subcommand given
    if args.command is None:
        args = parser.parse_args(["run"])

    if args.command == "serve":
        _run_server(args)
        return 0
    return _run_batch(args)


if __name__ == "__main__":
    sys.exit(main())
