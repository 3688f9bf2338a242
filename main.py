#!/usr/bin/env python

"""
OJT Log - Main Entry Point

An on-the-job-training hour log: daily entries of tasks, progress against a
required-hours target, calendar and out-of-office views, and CSV/Excel export.

Usage:
    python main.py

Configuration comes from OJTLOG_* environment variables, .env or
config/settings.yaml (see ojtlog/infra/config.py).
"""

import logging
import sys

import uvicorn

from ojtlog.infra.config import get_settings
from ojtlog.web import create_app


def main():
    """Main entry point"""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
