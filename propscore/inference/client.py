"""
Hosted Model Client
===================
Submits feature vectors to the deployed prop classifier and parses the
response into Prediction objects.

The model's probabilities and confidence are taken as returned. Tier, bet flag
and display percentages are derived here.

Usage:
    client = InferenceClient(settings.inference_url, token_provider, session=session)
    prediction = await client.predict(features)
    predictions = await client.predict_batch([features_a, features_b])
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from propscore.config.thresholds import TIMEOUT_CONFIG
from propscore.core.confidence import confidence_tier, should_bet
from propscore.core.exceptions import (
    AuthenticationError,
    InferenceParseError,
    InferenceRequestError,
    PropScoreError,
)
from propscore.core.schemas import ModelInfo, ModelPredictionRecord, ModelResponse, Prediction
from propscore.fetchers.base_fetcher import BaseFetcher
from propscore.inference.token_provider import CachedTokenProvider

logger = logging.getLogger(__name__)

FeatureVector = Dict[str, Any]


def percent_string(value: float) -> str:
    """0.4512 -> '45.1'"""
    return f"{value * 100:.1f}"


def build_prediction(record: ModelPredictionRecord, model_info: Optional[ModelInfo] = None) -> Prediction:
    """Derive tier, bet flag and display strings for one model record."""
    tier = confidence_tier(record.confidence)
    return Prediction(
        prediction=record.prediction,
        probability_over=record.probability_over,
        probability_under=record.probability_under,
        confidence=record.confidence,
        confidence_tier=tier,
        should_bet=should_bet(record.confidence),
        betting_value=record.betting_value or tier.value,
        probability_over_percent=percent_string(record.probability_over),
        probability_under_percent=percent_string(record.probability_under),
        confidence_percent=percent_string(record.confidence),
        model_info=model_info,
    )


def parse_model_response(payload: Any, expected: int) -> List[Prediction]:
    """
    Validate a raw endpoint response and convert it to predictions.

    Args:
        payload: Decoded JSON body
        expected: Number of instances that were submitted

    Raises:
        InferenceParseError: If the body does not match the response contract
            or the prediction count differs from `expected`
    """
    if not isinstance(payload, dict):
        raise InferenceParseError("response body is not an object")
    try:
        response = ModelResponse.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise InferenceParseError(first.get("msg", "invalid response"), field=field) from e

    if len(response.predictions) != expected:
        raise InferenceParseError(
            f"expected {expected} predictions, got {len(response.predictions)}",
            field="predictions",
        )

    model_info = None
    if response.deployedModelId or response.modelDisplayName or response.modelVersionId:
        model_info = ModelInfo(
            deployed_model_id=response.deployedModelId,
            model_display_name=response.modelDisplayName,
            model_version_id=response.modelVersionId,
        )
    return [build_prediction(record, model_info) for record in response.predictions]


class InferenceClient(BaseFetcher):
    """
    Client for the hosted prediction endpoint.

    Args:
        endpoint_url: Full `:predict` URL
        token_provider: Supplies bearer tokens
        session: Shared aiohttp session
    """

    def __init__(
        self,
        endpoint_url: str,
        token_provider: CachedTokenProvider,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = TIMEOUT_CONFIG.predict_single,
        batch_timeout: float = TIMEOUT_CONFIG.predict_batch,
    ):
        super().__init__("inference", session=session, timeout=timeout)
        self.endpoint_url = endpoint_url
        self.token_provider = token_provider
        self.batch_timeout = batch_timeout

    def _error(self, message: str, status_code: Optional[int] = None) -> Exception:
        if status_code in (401, 403):
            return AuthenticationError(f"endpoint rejected token (HTTP {status_code})", source="endpoint")
        return InferenceRequestError(message, status_code=status_code)

    async def _post_instances(self, instances: List[FeatureVector], timeout: float) -> Any:
        token = await self.token_provider.get_token()
        try:
            return await self._request_json(
                self.endpoint_url,
                method="POST",
                headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
                json_body={"instances": instances},
                timeout=timeout,
            )
        except AuthenticationError:
            self.token_provider.invalidate()
            raise

    async def predict(self, features: FeatureVector) -> Prediction:
        """
        Score one feature vector.

        Raises:
            AuthenticationError: If no token can be obtained or the endpoint rejects it
            InferenceRequestError: On timeout, transport error or non-2xx status
            InferenceParseError: If the response does not match the contract
        """
        payload = await self._post_instances([features], self.timeout)
        return parse_model_response(payload, expected=1)[0]

    async def predict_batch(self, features_list: Sequence[FeatureVector]) -> List[Prediction]:
        """Score several vectors in one call; output order matches input order."""
        if not features_list:
            return []
        payload = await self._post_instances(list(features_list), self.batch_timeout)
        predictions = parse_model_response(payload, expected=len(features_list))
        logger.debug(f"[{self.source_name}] Scored batch of {len(predictions)}")
        return predictions

    async def check_connection(self) -> Dict[str, Any]:
        """
        Report endpoint connectivity by obtaining a token. No prediction is made.

        Returns:
            Dict with status ("connected" / "auth_failed"), authenticated, endpoint
            and error when authentication failed
        """
        try:
            await self.token_provider.get_token()
        except PropScoreError as e:
            logger.warning(f"[{self.source_name}] Connection check failed: {e}")
            return {
                "status": "auth_failed",
                "authenticated": False,
                "endpoint": self.endpoint_url,
                "error": str(e),
            }
        return {"status": "connected", "authenticated": True, "endpoint": self.endpoint_url}
