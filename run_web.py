#!/usr/bin/env python3
"""
Main entry point for the Practice Efficiency Tracker web application.

This script launches the Flask-based web server.
"""
import os

from practice_tracker.ui.web_app import run_web_app

if __name__ == "__main__":
    # Run web app serving files from the project root
    project_root = os.path.dirname(os.path.abspath(__file__))
    run_web_app(static_folder=project_root)
