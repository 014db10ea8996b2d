"""
AI pick generation.

The pick itself is a placeholder (the home team at its posted spread).
An optional Anthropic writer rephrases the explanation and falls back to
the canned text on any error.
"""
from __future__ import annotations

import logging
from typing import Protocol

from anthropic import AsyncAnthropic

from hoopspicks.config import Settings
from hoopspicks.core.exceptions import DependencyError, ValidationError
from hoopspicks.integrations.odds_api import OddsApiClient, SampleGamesSource
from hoopspicks.models import NbaPick
from hoopspicks.prompts.pick_explanation import PICK_EXPLANATION_PROMPT, fallback_explanation
from hoopspicks.schemas.games import GameOdds, PickDraft
from hoopspicks.services.action_state import ActionState
from hoopspicks.services.nba_pick_service import NbaPickService

logger = logging.getLogger(__name__)

PHASES = ("early", "final")
ANTHROPIC_MODEL = "claude-sonnet-4-20250514"


class GamesSource(Protocol):
    async def fetch_upcoming_games(self) -> list[GameOdds]: ...


class PickWriter(Protocol):
    async def write_pick(self, game: GameOdds, phase: str) -> PickDraft: ...


class PlaceholderPickWriter:
    async def write_pick(self, game: GameOdds, phase: str) -> PickDraft:
        spread = game.odds.home_spread
        return PickDraft(
            recommended_spread=f"{game.home_team} {spread:+g}",
            explanation=fallback_explanation(game.home_team, spread, phase),
        )


class AnthropicPickWriter(PlaceholderPickWriter):
    def __init__(self, client: AsyncAnthropic, model: str = ANTHROPIC_MODEL):
        self.client = client
        self.model = model

    async def write_pick(self, game: GameOdds, phase: str) -> PickDraft:
        draft = await super().write_pick(game, phase)
        prompt = PICK_EXPLANATION_PROMPT.format(
            away_team=game.away_team,
            home_team=game.home_team,
            home_spread=game.odds.home_spread,
            away_spread=game.odds.away_spread,
            recommended_spread=draft.recommended_spread,
            phase=phase,
        )
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=200,
                messages=[{"role": "user", "content": prompt}],
            )
            text = message.content[0].text.strip()
        except Exception as e:
            logger.warning(f"Anthropic explanation failed for {game.game_id}: {str(e)}")
            return draft
        if text:
            draft.explanation = text
        return draft


def build_games_source(settings: Settings) -> GamesSource:
    if settings.odds_api_key is not None and settings.odds_api_key.get_secret_value():
        return OddsApiClient(settings.odds_api_key.get_secret_value(), settings.odds_api_base)
    return SampleGamesSource()


def build_pick_writer(settings: Settings) -> PickWriter:
    if settings.ai_picks_writer == "anthropic":
        if settings.anthropic_api_key is None:
            raise DependencyError("AI_PICKS_WRITER=anthropic requires ANTHROPIC_API_KEY")
        return AnthropicPickWriter(AsyncAnthropic(api_key=settings.anthropic_api_key.get_secret_value()))
    return PlaceholderPickWriter()


class AIPicksService:
    def __init__(self, picks: NbaPickService, games: GamesSource, writer: PickWriter):
        self.picks = picks
        self.games = games
        self.writer = writer

    async def generate(self, phase: str = "early") -> ActionState[list[NbaPick]]:
        if phase not in PHASES:
            raise ValidationError(f"phase must be one of {PHASES}, got {phase!r}")

        games = await self.games.fetch_upcoming_games()
        rows = []
        for game in games:
            draft = await self.writer.write_pick(game, phase)
            rows.append(
                {
                    "game_id": game.game_id,
                    "spread_pick": draft.recommended_spread,
                    "explanation": draft.explanation,
                }
            )

        if not rows:
            return ActionState.ok("No upcoming games to pick", [])

        result = await self.picks.create_picks(rows)
        if result.is_success:
            logger.info(f"Generated {len(rows)} {phase} AI picks")
            return ActionState.ok("AI picks generated and stored successfully", result.data)
        return ActionState.fail("Failed to generate NBA picks")
