"""
UI package for the Practice Efficiency Tracker.

This package contains the Flask web server exposing the session controller.
"""
from .web_app import WebAppState, create_app, run_web_app

__all__ = ["WebAppState", "create_app", "run_web_app"]
