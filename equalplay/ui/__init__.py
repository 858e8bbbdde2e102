"""
UI package for the Equal Play Tracker.

This package contains the Flask web server exposing the match services.
"""
from .web_app import WebAppState, create_app, run_web_app

__all__ = ["WebAppState", "create_app", "run_web_app"]
