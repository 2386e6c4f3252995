# FILE: sdlcraft/__init__.py
"""SDLCraft command-line front end: grammar parsing and deterministic repair."""

__version__ = "0.1.0"
