"""
PropScore API
=============
FastAPI-based REST API for ML player prop recommendations.

Provides endpoints for:
- Ranked props for one upcoming game
- Health checks (API, model endpoint)
- Cached player game logs (debugging)
"""

from propscore import __version__

__all__ = ["__version__"]
