"""Shared API dependencies."""
from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from hoopspicks.core.security import get_current_user, require_admin, require_pro
from hoopspicks.database import get_db
from hoopspicks.integrations.stripe_payments import StripePayments
from hoopspicks.services.membership import MembershipReconciler
from hoopspicks.services.profile_service import ProfileService


def get_payments(request: Request) -> StripePayments:
    payments = getattr(request.app.state, "payments", None)
    if payments is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payments are not configured",
        )
    return payments


def get_reconciler(
    payments: StripePayments = Depends(get_payments),
    db: Session = Depends(get_db),
) -> MembershipReconciler:
    return MembershipReconciler(payments=payments, profiles=ProfileService(db))


__all__ = [
    "get_current_user",
    "get_payments",
    "get_reconciler",
    "require_admin",
    "require_pro",
]
