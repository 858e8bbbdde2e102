#!/usr/bin/env python3
"""
Main entry point for the Equal Play Tracker web application.

This script launches the Flask-based web server.
"""
import logging
import os

from equalplay.ui.web_app import run_web_app

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("EQUALPLAY_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_web_app(
        host=os.environ.get("EQUALPLAY_HOST", "127.0.0.1"),
        port=int(os.environ.get("EQUALPLAY_PORT", "7122")),
    )
