"""
Unit Tests for Model Inference
==============================
Tests for response parsing, the inference client and bearer-token caching.
The HTTP layer is patched at `_request_json`.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest


class TestPercentString:
    """Tests for display percentages."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.45, "45.0"), (0.55, "55.0"), (0.12, "12.0"), (0.4512, "45.1"), (1.0, "100.0")],
    )
    def test_format(self, value, expected):
        from propscore.inference.client import percent_string

        assert percent_string(value) == expected


class TestParseModelResponse:
    """Tests for parse_model_response."""

    def test_parses_record(self, model_response):
        from propscore.core.confidence import ConfidenceTier
        from propscore.inference.client import parse_model_response

        prediction = parse_model_response(model_response, expected=1)[0]

        assert prediction.prediction == "under"
        assert prediction.probability_over == 0.45
        assert prediction.confidence == 0.12
        assert prediction.confidence_tier == ConfidenceTier.MEDIUM
        assert prediction.should_bet is True
        assert prediction.betting_value == "medium"
        assert prediction.probability_over_percent == "45.0"
        assert prediction.probability_under_percent == "55.0"
        assert prediction.confidence_percent == "12.0"
        assert prediction.model_info.model_display_name == "nba-props-xgb"

    def test_confidence_used_as_returned(self, record_factory):
        """Test confidence is not recomputed from the probabilities."""
        from propscore.inference.client import parse_model_response

        payload = {"predictions": [record_factory(probability_over=0.51, confidence=0.30)]}
        prediction = parse_model_response(payload, expected=1)[0]

        assert prediction.confidence == 0.30
        assert prediction.confidence_tier.value == "high"
        assert prediction.model_info is None

    def test_model_betting_value_is_kept(self, record_factory):
        from propscore.inference.client import parse_model_response

        payload = {"predictions": [record_factory(betting_value="strong")]}
        assert parse_model_response(payload, expected=1)[0].betting_value == "strong"

    def test_non_object_body(self):
        from propscore.core.exceptions import InferenceParseError
        from propscore.inference.client import parse_model_response

        with pytest.raises(InferenceParseError):
            parse_model_response(["not", "an", "object"], expected=1)

    def test_missing_field(self, record_factory):
        from propscore.core.exceptions import InferenceParseError
        from propscore.inference.client import parse_model_response

        record = record_factory()
        del record["confidence"]

        with pytest.raises(InferenceParseError) as exc_info:
            parse_model_response({"predictions": [record]}, expected=1)

        assert "confidence" in exc_info.value.field

    def test_missing_predictions(self):
        from propscore.core.exceptions import InferenceParseError
        from propscore.inference.client import parse_model_response

        with pytest.raises(InferenceParseError):
            parse_model_response({"deployedModelId": "1"}, expected=1)

    def test_count_mismatch(self, record_factory):
        from propscore.core.exceptions import InferenceParseError
        from propscore.inference.client import parse_model_response

        payload = {"predictions": [record_factory(), record_factory()]}

        with pytest.raises(InferenceParseError, match="expected 3 predictions, got 2"):
            parse_model_response(payload, expected=3)


class TestInferenceClient:
    """Tests for InferenceClient."""

    def _client(self, token_provider):
        from propscore.inference.client import InferenceClient

        return InferenceClient("https://model.example.com/v1/endpoints/1:predict", token_provider)

    @pytest.mark.asyncio
    async def test_predict_sends_instances(self, mock_token_provider, model_response):
        client = self._client(mock_token_provider)
        client._request_json = AsyncMock(return_value=model_response)

        prediction = await client.predict({"line": 28.5})

        assert prediction.confidence == 0.12
        kwargs = client._request_json.await_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["json_body"] == {"instances": [{"line": 28.5}]}
        assert kwargs["headers"]["Authorization"] == "Bearer test-token"
        assert kwargs["timeout"] == 30

    @pytest.mark.asyncio
    async def test_predict_batch_preserves_order(self, mock_token_provider, record_factory):
        client = self._client(mock_token_provider)
        client._request_json = AsyncMock(
            return_value={
                "predictions": [
                    record_factory(probability_over=0.60, confidence=0.20),
                    record_factory(probability_over=0.30, confidence=0.05),
                ]
            }
        )

        predictions = await client.predict_batch([{"line": 1}, {"line": 2}])

        assert [p.prediction for p in predictions] == ["over", "under"]
        assert [p.confidence_tier.value for p in predictions] == ["high", "low"]
        assert client._request_json.await_args.kwargs["timeout"] == 60

    @pytest.mark.asyncio
    async def test_predict_batch_empty(self, mock_token_provider):
        client = self._client(mock_token_provider)
        client._request_json = AsyncMock()

        assert await client.predict_batch([]) == []
        client._request_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_predict_batch_count_mismatch(self, mock_token_provider, model_response):
        from propscore.core.exceptions import InferenceParseError

        client = self._client(mock_token_provider)
        client._request_json = AsyncMock(return_value=model_response)

        with pytest.raises(InferenceParseError):
            await client.predict_batch([{"line": 1}, {"line": 2}])

    def test_rejected_token_maps_to_authentication_error(self, mock_token_provider):
        from propscore.core.exceptions import AuthenticationError, InferenceRequestError

        client = self._client(mock_token_provider)

        assert isinstance(client._error("denied", 401), AuthenticationError)
        assert isinstance(client._error("denied", 403), AuthenticationError)
        assert isinstance(client._error("boom", 500), InferenceRequestError)
        assert isinstance(client._error("timed out"), InferenceRequestError)

    @pytest.mark.asyncio
    async def test_authentication_failure_invalidates_token(self, mock_token_provider):
        from propscore.core.exceptions import AuthenticationError

        client = self._client(mock_token_provider)
        client._request_json = AsyncMock(side_effect=AuthenticationError("rejected", source="endpoint"))

        with pytest.raises(AuthenticationError):
            await client.predict({"line": 1})

        mock_token_provider.invalidate.assert_called_once()

    @pytest.mark.asyncio
    async def test_request_error_keeps_token(self, mock_token_provider):
        from propscore.core.exceptions import InferenceRequestError

        client = self._client(mock_token_provider)
        client._request_json = AsyncMock(side_effect=InferenceRequestError("timed out"))

        with pytest.raises(InferenceRequestError):
            await client.predict({"line": 1})

        mock_token_provider.invalidate.assert_not_called()

    @pytest.mark.asyncio
    async def test_check_connection_ok(self, mock_token_provider):
        client = self._client(mock_token_provider)

        status = await client.check_connection()

        assert status["status"] == "connected"
        assert status["authenticated"] is True
        assert "error" not in status

    @pytest.mark.asyncio
    async def test_check_connection_auth_failed(self, mock_token_provider):
        from propscore.core.exceptions import AuthenticationError

        mock_token_provider.get_token.side_effect = AuthenticationError("no token", source="static")
        client = self._client(mock_token_provider)

        status = await client.check_connection()

        assert status["status"] == "auth_failed"
        assert status["authenticated"] is False
        assert "no token" in status["error"]


class TestCachedTokenProvider:
    """Tests for token caching and refresh."""

    def _source(self, lifetime=3600):
        source = AsyncMock()
        source.name = "fake"
        source.fetch_token = AsyncMock(side_effect=[("token-1", lifetime), ("token-2", lifetime)])
        return source

    @pytest.mark.asyncio
    async def test_token_is_cached(self, fake_clock):
        from propscore.core.cache import MemoryCache
        from propscore.inference.token_provider import CachedTokenProvider

        source = self._source()
        provider = CachedTokenProvider(source, MemoryCache(clock=fake_clock))

        assert await provider.get_token() == "token-1"
        fake_clock.advance(3000)
        assert await provider.get_token() == "token-1"
        assert source.fetch_token.await_count == 1

    @pytest.mark.asyncio
    async def test_refreshes_within_margin(self, fake_clock):
        """Test the token is refetched once within 300s of expiry."""
        from propscore.core.cache import MemoryCache
        from propscore.inference.token_provider import CachedTokenProvider

        source = self._source()
        provider = CachedTokenProvider(source, MemoryCache(clock=fake_clock))

        await provider.get_token()
        fake_clock.advance(3300)

        assert await provider.get_token() == "token-2"

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self, fake_clock):
        from propscore.core.cache import MemoryCache
        from propscore.inference.token_provider import CachedTokenProvider

        source = self._source()
        provider = CachedTokenProvider(source, MemoryCache(clock=fake_clock))

        await provider.get_token()
        provider.invalidate()

        assert await provider.get_token() == "token-2"

    @pytest.mark.asyncio
    async def test_failed_fetch_is_not_cached(self, fake_clock):
        from propscore.core.cache import MemoryCache
        from propscore.core.exceptions import AuthenticationError
        from propscore.inference.token_provider import CachedTokenProvider

        source = self._source()
        source.fetch_token.side_effect = [AuthenticationError("down"), ("token-ok", 3600)]
        provider = CachedTokenProvider(source, MemoryCache(clock=fake_clock))

        with pytest.raises(AuthenticationError):
            await provider.get_token()
        assert await provider.get_token() == "token-ok"


class TestTokenSources:
    """Tests for static and google-auth token sources."""

    @pytest.mark.asyncio
    async def test_static_token(self):
        from propscore.inference.token_provider import StaticTokenSource

        assert await StaticTokenSource("abc").fetch_token() == ("abc", 3600)

    @pytest.mark.asyncio
    async def test_static_token_missing(self):
        from propscore.core.exceptions import AuthenticationError
        from propscore.inference.token_provider import StaticTokenSource

        with pytest.raises(AuthenticationError, match="source=static"):
            await StaticTokenSource(None).fetch_token()



class TestGoogleAuthTokenSource:
    """Tests for the application-default-credentials token source."""

    def _credentials(self, token="ya29.adc", expires_in=3600):
        from datetime import datetime, timedelta, timezone

        credentials = MagicMock()
        credentials.token = token
        credentials.expiry = (
            None
            if expires_in is None
            else datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(seconds=expires_in)
        )
        return credentials

    @pytest.mark.asyncio
    async def test_token_and_lifetime(self):
        from propscore.inference.token_provider import GoogleAuthTokenSource

        credentials = self._credentials()
        with patch("google.auth.default", return_value=(credentials, "proj")) as default, patch(
            "google.auth.transport.requests.Request"
        ):
            token, lifetime = await GoogleAuthTokenSource().fetch_token()

        assert token == "ya29.adc"
        assert lifetime == pytest.approx(3600, abs=5)
        default.assert_called_once_with(scopes=["https://www.googleapis.com/auth/cloud-platform"])
        credentials.refresh.assert_called_once()

    @pytest.mark.asyncio
    async def test_credentials_are_reused(self):
        from propscore.inference.token_provider import GoogleAuthTokenSource

        credentials = self._credentials()
        source = GoogleAuthTokenSource()
        with patch("google.auth.default", return_value=(credentials, "proj")) as default, patch(
            "google.auth.transport.requests.Request"
        ):
            await source.fetch_token()
            await source.fetch_token()

        assert default.call_count == 1
        assert credentials.refresh.call_count == 2

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        from google.auth.exceptions import DefaultCredentialsError

        from propscore.core.exceptions import AuthenticationError
        from propscore.inference.token_provider import GoogleAuthTokenSource

        with patch("google.auth.default", side_effect=DefaultCredentialsError("no ADC found")):
            with pytest.raises(AuthenticationError, match="source=google-auth"):
                await GoogleAuthTokenSource().fetch_token()

    @pytest.mark.asyncio
    async def test_refresh_failure(self):
        from google.auth.exceptions import RefreshError

        from propscore.core.exceptions import AuthenticationError
        from propscore.inference.token_provider import GoogleAuthTokenSource

        credentials = self._credentials()
        credentials.refresh.side_effect = RefreshError("invalid_grant")
        with patch("google.auth.default", return_value=(credentials, "proj")), patch(
            "google.auth.transport.requests.Request"
        ):
            with pytest.raises(AuthenticationError, match="invalid_grant"):
                await GoogleAuthTokenSource().fetch_token()

    @pytest.mark.asyncio
    async def test_empty_token(self):
        from propscore.core.exceptions import AuthenticationError
        from propscore.inference.token_provider import GoogleAuthTokenSource

        with patch("google.auth.default", return_value=(self._credentials(token=None), "proj")), patch(
            "google.auth.transport.requests.Request"
        ):
            with pytest.raises(AuthenticationError, match="no token"):
                await GoogleAuthTokenSource().fetch_token()

    def test_lifetime_from_expiry(self):
        from datetime import datetime

        from propscore.inference.token_provider import GoogleAuthTokenSource

        now = datetime(2025, 11, 20, 12, 0, 0)

        assert GoogleAuthTokenSource.lifetime_from_expiry(datetime(2025, 11, 20, 12, 30, 0), now) == 1800.0
        assert GoogleAuthTokenSource.lifetime_from_expiry(datetime(2025, 11, 20, 11, 0, 0), now) == 0.0
        assert GoogleAuthTokenSource.lifetime_from_expiry(None) == 3600.0
