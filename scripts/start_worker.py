#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Celery Worker Entry Point
# =============================================================================
# Starts a Celery worker that consumes the refresh queue.
#
# Usage:
#   python scripts/start_worker.py
#
#   # Or use Celery CLI directly
#   celery -A workers.celery_app worker -Q default,refresh --loglevel=info
#
# Prerequisites:
#   - Redis reachable at REDIS_URL
#   - Supabase credentials set (.env file)
# =============================================================================

import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workers.celery_app import celery_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    """Start the Celery worker."""
    logger.info("Starting ArgenStats refresh worker (Ctrl+C to stop)")

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "--queues=default,refresh",
        "--concurrency=1",
    ])


if __name__ == "__main__":
    main()
