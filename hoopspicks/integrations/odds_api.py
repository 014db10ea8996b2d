from __future__ import annotations

import logging
from typing import Any

import httpx

from hoopspicks.core.exceptions import DependencyError
from hoopspicks.schemas.games import GameOdds, SpreadOdds

logger = logging.getLogger(__name__)

SPORT_KEY = "basketball_nba"

SAMPLE_GAMES: list[GameOdds] = [
    GameOdds(
        game_id="game-1001",
        home_team="Lakers",
        away_team="Warriors",
        odds=SpreadOdds(home_spread=-2.5, away_spread=2.5),
    ),
    GameOdds(
        game_id="game-1002",
        home_team="Celtics",
        away_team="Nets",
        odds=SpreadOdds(home_spread=-5.5, away_spread=5.5),
    ),
]


class SampleGamesSource:
    """Fixed slate used when no odds feed is configured."""

    async def fetch_upcoming_games(self) -> list[GameOdds]:
        return [game.model_copy(deep=True) for game in SAMPLE_GAMES]


class OddsApiClient:
    """Upcoming NBA games with point spreads from the-odds-api.com."""

    def __init__(self, api_key: str, base_url: str = "https://api.the-odds-api.com/v4"):
        if not api_key:
            raise ValueError("ODDS_API_KEY is not configured")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    async def fetch_upcoming_games(self) -> list[GameOdds]:
        params = {
            "apiKey": self.api_key,
            "regions": "us",
            "markets": "spreads",
            "oddsFormat": "american",
        }
        try:
            async with httpx.AsyncClient(timeout=20.0) as client:
                response = await client.get(f"{self.base_url}/sports/{SPORT_KEY}/odds", params=params)
                response.raise_for_status()
                events = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise DependencyError(f"Odds API request failed: {exc}") from exc

        games = []
        for event in events or []:
            game = self._parse_event(event)
            if game is not None:
                games.append(game)
        logger.info(f"Odds API returned {len(games)} games with spreads")
        return games

    @staticmethod
    def _parse_event(event: dict[str, Any]) -> GameOdds | None:
        home = event.get("home_team")
        away = event.get("away_team")
        for bookmaker in event.get("bookmakers") or []:
            for market in bookmaker.get("markets") or []:
                if market.get("key") != "spreads":
                    continue
                points = {o.get("name"): o.get("point") for o in market.get("outcomes") or []}
                if points.get(home) is None or points.get(away) is None:
                    continue
                return GameOdds(
                    game_id=str(event.get("id")),
                    home_team=home,
                    away_team=away,
                    odds=SpreadOdds(home_spread=points[home], away_spread=points[away]),
                )
        return None
