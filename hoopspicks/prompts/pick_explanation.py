from __future__ import annotations

PICK_EXPLANATION_PROMPT = """
You write short explanations for NBA spread picks.

Rules:
- Max 2 sentences.
- Mention the team and the spread exactly as given.
- No guarantees, no betting advice language.
- Plain text only.

Game: {away_team} at {home_team}
Spread: {home_team} {home_spread} / {away_team} {away_spread}
Pick: {recommended_spread}
Phase: {phase}
"""


def fallback_explanation(team: str, spread: float, phase: str) -> str:
    return f"AI picks the {team} to cover {spread} because it's the {phase} run."
