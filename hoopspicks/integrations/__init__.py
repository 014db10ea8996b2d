"""External integration adapters."""

from .odds_api import OddsApiClient, SampleGamesSource
from .stripe_payments import StripePayments

__all__ = [
    "OddsApiClient",
    "SampleGamesSource",
    "StripePayments",
]
