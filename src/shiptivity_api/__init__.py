"""
Shiptivity clients board backend.

The FastAPI application lives in ``shiptivity_api.main`` (``app`` and
``create_app``); it is not imported here so that importing the package has
no side effects.
"""

__version__ = "0.1.0"
