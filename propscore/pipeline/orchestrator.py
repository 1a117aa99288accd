"""
Props Orchestrator
==================
End-to-end flow for one request: find the game, extract prop candidates,
keep the tracked star players, score each candidate through game logs,
features and the hosted model, then rank the recommended props.

Any per-candidate failure (no logs, a feature or inference error, an
unexpected exception) drops only that candidate. An authentication failure
against the model endpoint aborts the whole request and cancels the
remaining candidates.

Usage:
    orchestrator = PropsOrchestrator(odds_client, game_log_store, inference_client, roster)
    result = await orchestrator.get_top_props("Lakers", "Celtics", "nba")
"""

import asyncio
import logging
import time
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from propscore.config.constants import DEFAULT_BOOKMAKER, SGO_LEAGUE_ID, SUPPORTED_SPORT
from propscore.config.thresholds import FAN_OUT_CONFIG, WINDOW_CONFIG, FanOutConfig
from propscore.core.confidence import ConfidenceTier, is_recommended
from propscore.core.exceptions import (
    AuthenticationError,
    EventNotFoundError,
    FeatureSchemaError,
    InferenceParseError,
    InferenceRequestError,
    NoPropsAvailableError,
    NoRosterMatchesError,
    RequestValidationError,
    UnsupportedSportError,
    UpstreamFetchError,
)
from propscore.core.schemas import PropCandidate, PropsResult, ScoredProp
from propscore.features.feature_engine import FeatureEngine
from propscore.fetchers.game_logs import GameLogStore
from propscore.fetchers.odds_events import OddsEventsClient, extract_candidates, find_event, team_long_name
from propscore.inference.client import InferenceClient
from propscore.pipeline.roster import RosterPlayer, StarRoster
from propscore.utils.season_helpers import DateLike, date_to_season, previous_season, to_date
from propscore.utils.team_utils import team_code

logger = logging.getLogger(__name__)


def validate_request(team1: Optional[str], team2: Optional[str], sport: Optional[str]) -> None:
    """
    Raises:
        RequestValidationError: If team1, team2 or sport is missing/blank
        UnsupportedSportError: If sport is not the supported league
    """
    missing = [
        name
        for name, value in (("team1", team1), ("team2", team2), ("sport", sport))
        if not value or not str(value).strip()
    ]
    if missing:
        raise RequestValidationError(missing)
    if sport.strip().lower() != SUPPORTED_SPORT:
        raise UnsupportedSportError(sport, supported=SUPPORTED_SPORT)


def rank_props(scored: Sequence[ScoredProp], top_n: int) -> List[ScoredProp]:
    """Recommended props by confidence, highest first, ties keep input order."""
    recommended = [prop for prop in scored if is_recommended(prop.prediction)]
    return sorted(recommended, key=lambda prop: prop.prediction.confidence, reverse=True)[:top_n]


class PropsOrchestrator:
    """
    Coordinates the props pipeline for a single game.

    Attributes:
        odds_client: Events/odds provider
        game_log_store: Cached player game logs
        inference_client: Hosted model client
        roster: Tracked star players
        feature_engine: Feature vector builder
        fan_out: Concurrency cap and result size
    """

    def __init__(
        self,
        odds_client: OddsEventsClient,
        game_log_store: GameLogStore,
        inference_client: InferenceClient,
        roster: StarRoster,
        feature_engine: Optional[FeatureEngine] = None,
        fan_out: FanOutConfig = FAN_OUT_CONFIG,
        log_limit: int = WINDOW_CONFIG.default_log_limit,
    ):
        self.odds_client = odds_client
        self.game_log_store = game_log_store
        self.inference_client = inference_client
        self.roster = roster
        self.feature_engine = feature_engine or FeatureEngine()
        self.fan_out = fan_out
        self.log_limit = log_limit

    # ==========================================================================
    # Pipeline steps
    # ==========================================================================

    async def resolve_event(self, team1: str, team2: str) -> Dict:
        """
        Upcoming event between the two teams.

        Raises:
            EventNotFoundError: If no event matches or the provider failed
        """
        try:
            events = await self.odds_client.fetch_events(SGO_LEAGUE_ID)
        except UpstreamFetchError as e:
            logger.error(f"Event fetch failed: {e}", extra={"team1": team1, "team2": team2})
            raise EventNotFoundError(team1, team2) from e

        event = find_event(events, team1, team2)
        if event is None:
            logger.info(
                f"No event among {len(events)} matches {team1} vs {team2}",
                extra={"team1": team1, "team2": team2},
            )
            raise EventNotFoundError(team1, team2)
        return event

    def filter_to_roster(self, candidates: Sequence[PropCandidate]) -> List[Tuple[PropCandidate, RosterPlayer]]:
        matched = []
        for candidate in candidates:
            player = self.roster.match(candidate)
            if player is not None:
                matched.append((candidate, player))
        return matched

    async def lookup_player_id(self, name: str) -> Optional[int]:
        try:
            return await self.game_log_store.search_player(name)
        except Exception as e:
            logger.error(f"Player id lookup failed for {name}: {e}", exc_info=True)
            return None

    async def resolve_player_ids(
        self, matched: Sequence[Tuple[PropCandidate, RosterPlayer]]
    ) -> List[PropCandidate]:
        """
        Attach stats-provider ids to matched candidates.

        Roster ids are used when present; other players are looked up by name
        once each. Candidates whose player cannot be resolved are dropped.
        """
        lookups = sorted({player.name for _, player in matched if player.api_sports_id is None})
        found = await asyncio.gather(*(self.lookup_player_id(name) for name in lookups))
        resolved_ids = dict(zip(lookups, found))

        resolved = []
        for candidate, player in matched:
            stats_id = player.api_sports_id or resolved_ids.get(player.name)
            if stats_id is None:
                logger.info(f"Dropping {candidate.player_name}: no stats-provider id")
                continue
            resolved.append(candidate.model_copy(update={"stats_player_id": stats_id}))
        return resolved

    async def fetch_game_logs(self, stats_player_id: int, game_date: date) -> list:
        """Recent games in the game date's season, else the previous season."""
        season = date_to_season(game_date)
        logs = await self.game_log_store.get_recent_games(stats_player_id, season=season, limit=self.log_limit)
        if logs:
            return logs
        logger.debug(f"No {season} games for player {stats_player_id}, trying previous season")
        return await self.game_log_store.get_recent_games(
            stats_player_id, season=previous_season(season), limit=self.log_limit
        )

    async def score_candidate(
        self,
        candidate: PropCandidate,
        home_code: str,
        away_code: str,
        game_date: date,
        semaphore: asyncio.Semaphore,
    ) -> Optional[ScoredProp]:
        """
        Game logs -> features -> prediction for one candidate.

        Returns:
            ScoredProp, or None if the candidate could not be scored

        Raises:
            AuthenticationError: Propagated so the request aborts
        """
        log_extra = {"player_id": candidate.stats_player_id, "stat_type": candidate.stat_type}
        async with semaphore:
            try:
                logs = await self.fetch_game_logs(candidate.stats_player_id, game_date)
                if not logs:
                    logger.info(f"No game logs for {candidate.player_name}", extra=log_extra)
                    return None

                features = self.feature_engine.compute_features(
                    game_logs=logs,
                    prop_type=candidate.stat_type,
                    home_team=home_code,
                    away_team=away_code,
                    is_home=candidate.is_home,
                    game_date=game_date,
                    line=candidate.line,
                    odds_over=candidate.odds_over,
                    odds_under=candidate.odds_under,
                    bookmaker=candidate.bookmaker_over or DEFAULT_BOOKMAKER,
                )
                prediction = await self.inference_client.predict(features)
                return ScoredProp(
                    candidate=candidate,
                    prediction=prediction,
                    games_used=len(logs),
                    player_stats=FeatureEngine.summarize(features),
                )
            except AuthenticationError:
                raise
            except (FeatureSchemaError, InferenceParseError, InferenceRequestError) as e:
                logger.warning(
                    f"Skipping {candidate.player_name} {candidate.stat_type}: {e}",
                    extra={**log_extra, "error_type": type(e).__name__},
                )
                return None
            except Exception as e:
                logger.error(
                    f"Unexpected error scoring {candidate.player_name} {candidate.stat_type}: {e}",
                    extra={**log_extra, "error_type": type(e).__name__},
                    exc_info=True,
                )
                return None

    async def score_all(
        self,
        candidates: Sequence[PropCandidate],
        home_code: str,
        away_code: str,
        game_date: date,
    ) -> List[Optional[ScoredProp]]:
        """
        Score every candidate with at most `fan_out.max_concurrency` in flight.

        Results keep candidate order. When a candidate raises, the remaining
        tasks are cancelled and awaited before the error propagates.
        """
        semaphore = asyncio.Semaphore(self.fan_out.max_concurrency)
        tasks = [
            asyncio.create_task(self.score_candidate(candidate, home_code, away_code, game_date, semaphore))
            for candidate in candidates
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    # ==========================================================================
    # Entry point
    # ==========================================================================

    async def get_top_props(
        self,
        team1: Optional[str],
        team2: Optional[str],
        sport: Optional[str],
        game_date: Optional[DateLike] = None,
    ) -> PropsResult:
        """
        Ranked, confidence-scored props for the game between team1 and team2.

        Args:
            team1: Team name (full or partial, either side)
            team2: Team name (full or partial, either side)
            sport: League; only 'nba' is supported
            game_date: Game date override (default: the event's start time)

        Returns:
            PropsResult with at most `fan_out.top_n` recommended props

        Raises:
            RequestValidationError / UnsupportedSportError: Bad request
            EventNotFoundError / NoPropsAvailableError / NoRosterMatchesError: Nothing to score
            AuthenticationError: Model endpoint credentials failed
        """
        started = time.perf_counter()
        validate_request(team1, team2, sport)

        event = await self.resolve_event(team1, team2)
        event_id = str(event.get("eventID", ""))
        home_name = team_long_name(event, "home")
        away_name = team_long_name(event, "away")
        game_time = (event.get("status") or {}).get("startsAt")

        candidates = extract_candidates(event)
        if not candidates:
            raise NoPropsAvailableError(event_id)

        matched = self.filter_to_roster(candidates)
        logger.info(
            f"Matched {len(matched)} of {len(candidates)} props to star players",
            extra={"event_id": event_id},
        )
        if not matched:
            raise NoRosterMatchesError(len(candidates))

        resolved = await self.resolve_player_ids(matched)

        home_code = team_code(home_name, self.roster.team_codes)
        away_code = team_code(away_name, self.roster.team_codes)
        target_date = to_date(game_date or game_time or date.today())

        outcomes = await self.score_all(resolved, home_code, away_code, target_date)
        scored = [outcome for outcome in outcomes if outcome is not None]

        top_props = rank_props(scored, self.fan_out.top_n)
        recommended = [prop for prop in scored if is_recommended(prop.prediction)]
        high = sum(1 for prop in recommended if prop.prediction.confidence_tier == ConfidenceTier.HIGH)
        medium = sum(1 for prop in recommended if prop.prediction.confidence_tier == ConfidenceTier.MEDIUM)

        result = PropsResult(
            event_id=event_id,
            home_team=home_name,
            away_team=away_name,
            game_time=game_time,
            total_props_available=len(candidates),
            star_player_props_analyzed=len(matched),
            processed_count=len(scored),
            high_confidence_count=high,
            medium_confidence_count=medium,
            top_props=top_props,
        )
        logger.info(
            f"Props pipeline finished in {time.perf_counter() - started:.2f}s",
            extra=result.summary(),
        )
        return result
