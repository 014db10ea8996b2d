"""
Generate and store one batch of AI picks.

Usage:
  python scripts/generate_ai_picks.py [--phase early|final]
"""
from __future__ import annotations

import asyncio
import sys

import click

from hoopspicks.config import settings
from hoopspicks.core.exceptions import AppError
from hoopspicks.core.logger import configure_logging
from hoopspicks.database import SessionLocal, init_db
from hoopspicks.services.ai_picks import PHASES, AIPicksService, build_games_source, build_pick_writer
from hoopspicks.services.nba_pick_service import NbaPickService


async def run(phase: str) -> int:
    db = SessionLocal()
    try:
        service = AIPicksService(
            NbaPickService(db),
            build_games_source(settings),
            build_pick_writer(settings),
        )
        result = await service.generate(phase)
        click.echo(f"{result.message}: {len(result.data or [])} picks")
        return 0 if result.is_success else 1
    except AppError as e:
        click.echo(f"Pick generation failed: {e}", err=True)
        return 1
    finally:
        db.close()


@click.command()
@click.option("--phase", type=click.Choice(PHASES), default="early", show_default=True)
def main(phase: str) -> None:
    """Generate AI NBA spread picks for one phase."""
    configure_logging(settings.log_level)
    init_db()
    sys.exit(asyncio.run(run(phase)))


if __name__ == "__main__":
    main()
