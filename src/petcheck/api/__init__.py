"""
FastAPI web API for PetCheck.
"""

from petcheck.api.server import create_app, main

__all__ = ["create_app", "main"]
