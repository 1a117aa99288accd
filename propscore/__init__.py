"""
PropScore
=========
ML-backed NBA player prop recommendations for a single upcoming game.

Subpackages:
    api: FastAPI application and routes
    config: Settings, constants and thresholds
    core: Exceptions, logging, schemas, cache and confidence tiers
    features: 88-feature vector construction from game logs and odds
    fetchers: Stats and odds provider clients (async)
    inference: Hosted classifier client and token handling
    pipeline: Roster filtering and request orchestration
    utils: Season, name and team helpers
"""

__version__ = "1.0.0"
