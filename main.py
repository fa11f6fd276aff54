#!/usr/bin/env python3
"""Event log demo: worker threads log into the default store."""

import argparse
import logging
import os
import random
import signal
import sys
import threading

from eventlog import Level, default_store
from eventlog.config import load_config, load_yaml_config
from eventlog.viewer import create_viewer_app, run_viewer

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_MESSAGES = {
    Level.SUCCESS: "job finished",
    Level.INFO: "request handled",
    Level.WARNING: "slow response",
    Level.ERROR: "upstream call failed",
    Level.FATAL: "worker crashed",
}


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="In-memory event log demo")
    parser.add_argument("--config", default=os.environ.get("EVENTLOG_CONFIG"),
                        help="Path to YAML config file")
    parser.add_argument("--workers", type=int, default=4, help="Number of logging threads")
    parser.add_argument("--events", type=int, default=10, help="Events per worker")
    parser.add_argument("--filter", nargs="*", default=[],
                        help="Only export events carrying one of these tags")
    parser.add_argument("--serve", action="store_true",
                        help="Keep running and serve the viewer until interrupted")
    return parser


def _worker(store, worker_id: int, count: int):
    for i in range(count):
        level = random.choice(list(Level))
        message = f"{_MESSAGES[level]} (worker {worker_id}, #{i})"
        tags = [f"worker-{worker_id}", level.name.lower()]
        error = RuntimeError(f"failure in worker {worker_id}") if level >= Level.ERROR else None
        store.log(level, message, error, tags)


def main():
    args = build_cli_parser().parse_args()
    config = load_config(load_yaml_config(args.config))
    store = default_store(config)

    threads = [
        threading.Thread(target=_worker, args=(store, n, args.events), daemon=True)
        for n in range(args.workers)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    if not store.flush(timeout=5):
        logger.warning("Timed out waiting for queued events")
    store.set_filter_tags(args.filter)
    logger.info("Recorded %d events, %d displayed", len(store), len(store.displayed_events))
    print(store.export_text)

    if not args.serve:
        store.close()
        return

    stop = threading.Event()

    def _signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        stop.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    app = create_viewer_app(store)
    viewer = threading.Thread(target=run_viewer,
                              args=(app, config.viewer_host, config.viewer_port), daemon=True)
    viewer.start()
    logger.info("Viewer running on http://%s:%d", config.viewer_host, config.viewer_port)

    while not stop.is_set():
        store.info("heartbeat", tags=["heartbeat"])
        stop.wait(timeout=5)
    store.close()


if __name__ == "__main__":
    main()
