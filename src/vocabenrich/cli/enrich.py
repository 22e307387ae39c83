#!/usr/bin/env python3
"""
vocab-enrich — Enrich ranked vocabulary lists with dictionary lookups.

Parses each input file, looks up every headword (5 at a time by
default), and writes the enriched records as JSON.

Usage:
    vocab-enrich words.md                          # words_parsed.json
    vocab-enrich a.md b.md --mode merged           # vocabulary_merged.json
    vocab-enrich a.md --mode batch --batch-size 50 # vocabulary_batch_<n>.json
    vocab-enrich a.md b.md --mode all -o out/

While running:
    Ctrl-C             cancel (records finished so far are still written)
    Ctrl-C again       quit without waiting for in-flight lookups
    Ctrl-Z / SIGUSR1   pause / resume
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Callable, List, Sequence

from vocabenrich.config import load_config
from vocabenrich.enrich.scheduler import (
    EnrichmentScheduler,
    FileResult,
    RunPhase,
    SourceFile,
)
from vocabenrich.export import ExportPayload, ResultAggregator, write_payloads
from vocabenrich.lookup import LookupClient
from vocabenrich.progress_display import ProgressDisplay

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

EXPORT_MODES = ("per-file", "merged", "batch", "all")

# Seconds between progress panel redraws
REFRESH_INTERVAL = 0.1

EXIT_CANCELLED = 130


def make_interrupt_handler(scheduler: EnrichmentScheduler) -> Callable[[], None]:
    """First Ctrl-C cancels the run; a second one stops waiting on in-flight lookups."""
    def on_interrupt():
        if scheduler.cancel_requested:
            raise KeyboardInterrupt
        scheduler.cancel()
    return on_interrupt


def install_signal_handlers(loop: asyncio.AbstractEventLoop, scheduler: EnrichmentScheduler) -> List[int]:
    """Route Ctrl-C to cancel() and Ctrl-Z/SIGUSR1 to toggle_pause()."""
    handlers = [(signal.SIGINT, make_interrupt_handler(scheduler))]
    for name in ("SIGTSTP", "SIGUSR1"):
        signum = getattr(signal, name, None)
        if signum is not None:
            handlers.append((signum, scheduler.toggle_pause))

    installed = []
    for signum, callback in handlers:
        try:
            loop.add_signal_handler(signum, callback)
            installed.append(signum)
        except (NotImplementedError, RuntimeError, ValueError):
            # No signal support on this platform/thread
            logger.debug(f"Cannot install handler for signal {signum}")
    return installed


async def run_enrichment(
    scheduler: EnrichmentScheduler,
    sources: Sequence[SourceFile],
    show_progress: bool = True,
) -> List[FileResult]:
    """Run the scheduler, redrawing the progress panel until it finishes."""
    loop = asyncio.get_running_loop()
    installed = install_signal_handlers(loop, scheduler)

    try:
        task = asyncio.create_task(scheduler.start(sources))

        if show_progress:
            with ProgressDisplay("Enriching vocabulary") as progress:
                while not task.done():
                    progress.refresh(scheduler.status(), scheduler.events)
                    await asyncio.wait({task}, timeout=REFRESH_INTERVAL)
                progress.refresh(scheduler.status(), scheduler.events)

        return await task

    finally:
        for signum in installed:
            loop.remove_signal_handler(signum)


def select_payloads(aggregator: ResultAggregator, mode: str, batch_size: int) -> List[ExportPayload]:
    payloads: List[ExportPayload] = []
    if mode in ("per-file", "all"):
        payloads.extend(aggregator.per_file())
    if mode in ("merged", "all"):
        payloads.append(aggregator.merged())
    if mode in ("batch", "all"):
        payloads.extend(aggregator.batches(batch_size))
    return payloads


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='vocab-enrich',
        description='Enrich vocabulary list files with dictionary lookups',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input format (blocks separated by blank lines):
    1 run
    v. ["跑"]  n. ["跑步"]
        """
    )
    parser.add_argument('files', nargs='+', type=Path,
                        help='Vocabulary list files to enrich')
    parser.add_argument('-o', '--output-dir', type=Path, default=Path('.'),
                        help='Directory for JSON output (default: current directory)')
    parser.add_argument('--mode', choices=EXPORT_MODES, default='per-file',
                        help='Export layout (default: per-file)')
    parser.add_argument('--batch-size', type=int, default=None,
                        help='Records per file in batch mode (default: from config, 50)')
    parser.add_argument('--concurrency', type=int, default=None,
                        help='Lookups in flight at once (default: from config, 5)')
    parser.add_argument('--config', type=Path, default=None,
                        help='YAML config file (default: $VOCABENRICH_CONFIG or ./vocabenrich.yaml)')
    parser.add_argument('--no-progress', action='store_true',
                        help='Disable the live progress panel')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv=None) -> int:
    """Entry point for vocab-enrich CLI."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(
            args.config,
            concurrency=args.concurrency,
            batch_size=args.batch_size,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    missing = [path for path in args.files if not path.exists()]
    if missing:
        for path in missing:
            logger.error(f"Input file not found: {path}")
        return 1

    sources = [SourceFile.from_path(path) for path in args.files]
    show_progress = not args.no_progress

    if show_progress and not args.verbose:
        # Events are shown in the panel already
        logging.getLogger('vocabenrich.enrich.scheduler').setLevel(logging.WARNING)

    logger.info(f"Enriching {len(sources)} file(s) via {config.endpoint}")
    logger.info(f"  Concurrency: {config.concurrency}")

    interrupted = False
    with LookupClient(
        endpoint=config.endpoint,
        timeout=config.timeout,
        user_agent=config.user_agent,
    ) as client:
        scheduler = EnrichmentScheduler.from_config(config, client)
        try:
            results = asyncio.run(run_enrichment(scheduler, sources, show_progress))
        except KeyboardInterrupt:
            logger.warning("Interrupted. Writing records finished so far")
            results = scheduler.results
            interrupted = True

    status = scheduler.status()
    logger.info(f"Processed {status.current:,} of {status.total:,} words")

    aggregator = ResultAggregator(results)
    payloads = select_payloads(aggregator, args.mode, config.batch_size)

    logger.info("Writing output...")
    write_payloads(payloads, args.output_dir)

    if interrupted or status.state is RunPhase.CANCELLED:
        logger.warning("Run was cancelled; output contains partial results")
        return EXIT_CANCELLED
    return 0


if __name__ == "__main__":
    sys.exit(main())
