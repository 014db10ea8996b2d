"""
API Routes Package
"""
from . import (
    health,
    profiles,
    picks,
    my_picks,
    leaderboard,
    stripe_webhooks,
)
