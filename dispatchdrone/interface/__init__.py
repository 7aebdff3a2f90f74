"""Mini README: Interactive interfaces (web/CLI) for Dispatchdrone.

Exports the FastAPI application factory that serves the planning API. The
Typer CLI in ``main_dispatch_centre.py`` builds on the same factory.
"""

from .web_app import create_application

__all__ = ["create_application"]
