"""
PropScore Inference Module
==========================
Client for the hosted prop classifier and its access-token providers.
"""

from propscore.inference.client import InferenceClient, build_prediction, parse_model_response
from propscore.inference.token_provider import (
    CachedTokenProvider,
    GoogleAuthTokenSource,
    StaticTokenSource,
    TokenSource,
)

__all__ = [
    "InferenceClient",
    "build_prediction",
    "parse_model_response",
    "CachedTokenProvider",
    "GoogleAuthTokenSource",
    "StaticTokenSource",
    "TokenSource",
]
