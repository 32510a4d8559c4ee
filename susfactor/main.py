#!/usr/bin/env python3
"""
SusFactor - statistical aim anomaly detector - Main Entry Point
"""

import sys
import os
import signal
import logging
import time
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from utils.config import Config
from utils.logger import setup_logging
from utils.helpers import format_uptime
from detection.engine import DetectionEngine
from database.connection import DatabaseConnection
from database.operations import DatabaseOperations
from events.feed import EventFeed

STATS_LOG_INTERVAL = 300


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='SusFactor aim anomaly detector')
    parser.add_argument('--config', default='config.yaml', help='Config file path')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--events', default='-', help='JSON-lines event file (default: stdin)')
    parser.add_argument('--status', action='store_true', help='Print the server baseline and exit')
    parser.add_argument('--check', metavar='PLAYER_ID', help='Print aim stats for a player and exit')
    parser.add_argument('--rebuild', action='store_true', help='Rebuild the baseline from saved state and exit')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # Load config
    config = Config(args.config)
    if args.debug:
        config.set('app.debug', True)

    # Setup logging
    setup_logging(config)
    logger = logging.getLogger('susfactor.main')

    # Initialize database
    db = DatabaseConnection(config)
    db.initialize()

    engine = DetectionEngine(config)

    # One-shot queries against the saved state
    if args.status or args.check or args.rebuild:
        if args.rebuild:
            engine.rebuild_baseline()
        if args.status:
            print(engine.baseline_summary())
            recent = DatabaseOperations.get_detection_stats(hours=24)
            print(f"Detections in the last 24h: {recent.get('total', 0)}")
            for row in recent.get('top_players', []):
                print(f" - {row['display_name']} ({row['player_id']}): {row['count']}x, peak {row['peak']:.1f}")
        if args.check:
            print(engine.player_summary(args.check, reveal_full_detail=True))
        db.close()
        return 0

    logger.info("=" * 60)
    logger.info(f"  {config.get('app.name', 'SusFactor')} v{config.get('app.version', '2.0.5')}")
    logger.info("=" * 60)

    feed = EventFeed(config, args.events)
    feed.add_callback(engine.submit)

    # Graceful shutdown handler
    def shutdown(signum, frame):
        logger.info("Shutdown signal received...")
        feed.stop()
        engine.stop()
        db.close()
        logger.info("Detector stopped.")
        sys.exit(0)

    signal.signal(signal.SIGINT,  shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        engine.start()
        feed.start()
        logger.info("Detector running. Press Ctrl+C to stop.")
        last_report = time.time()
        while True:
            time.sleep(1)
            if time.time() - last_report >= STATS_LOG_INTERVAL:
                last_report = time.time()
                stats = engine.get_stats()
                logger.info(
                    f"Up {format_uptime(stats['runtime_seconds'])} — "
                    f"{stats['events_processed']} events, {stats['players_tracked']} players, "
                    f"{stats['detections']} detections"
                )
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        feed.stop()
        engine.stop()
        sys.exit(1)


if __name__ == '__main__':
    sys.exit(main())
