"""
UI package for the Sideline Rotation engine.

This package contains the Flask web server exposing the match session.
"""
from .web_app import create_app, run_web_app

__all__ = ["create_app", "run_web_app"]
