"""Commission calculator - the single commission formula of the service"""

from decimal import Decimal
from typing import Dict, Optional

from cycle_ledger.domain.exceptions import InvalidCommissionRateError
from cycle_ledger.domain.models import User
from cycle_ledger.utils.money_utils import round_cents


def validate_commission_rate(rate_percent: float) -> float:
    """Reject rates outside 0-100 percent"""
    if isinstance(rate_percent, bool) or not isinstance(rate_percent, (int, float)):
        raise InvalidCommissionRateError(f"Commission rate must be a number (got {rate_percent!r})")
    if not 0 <= rate_percent <= 100:
        raise InvalidCommissionRateError(f"Commission rate must be between 0 and 100 (got {rate_percent})")
    return float(rate_percent)


def calculate_commission(net_base_cents: int, rate_percent: float) -> int:
    """
    Commission on a net base: net_base * rate / 100, only when net_base > 0.

    Losses never produce a negative commission. The result is rounded to
    whole cents, half away from zero.
    """
    validate_commission_rate(rate_percent)
    if net_base_cents <= 0:
        return 0
    return round_cents(Decimal(net_base_cents) * Decimal(str(rate_percent)) / 100)


def resolve_commission_rate(users_by_id: Dict[str, User], operator_id: str) -> float:
    """Current rate for an operator; 0 when the user is missing (e.g. deleted)"""
    user: Optional[User] = users_by_id.get(operator_id)
    if user is None or user.is_admin:
        return 0.0
    return float(user.commission_rate or 0.0)
