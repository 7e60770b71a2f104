"""Unit tests for the commission formula"""

import pytest
from cycle_ledger.domain.commission import calculate_commission, resolve_commission_rate, validate_commission_rate
from cycle_ledger.domain.exceptions import InvalidCommissionRateError
from cycle_ledger.domain.models import User


def test_commission_on_positive_base():
    """100.00 at 20% -> 20.00"""
    assert calculate_commission(10000, 20) == 2000


@pytest.mark.parametrize("rate", [0, 0.5, 10, 33.3, 100])
@pytest.mark.parametrize("net_base", [0, -1, -15000])
def test_no_commission_on_loss_or_zero(net_base, rate):
    """Losses never produce a negative commission"""
    assert calculate_commission(net_base, rate) == 0


def test_commission_rounds_half_away_from_zero():
    # 0.05 * 10% = 0.005 -> 0.01
    assert calculate_commission(5, 10) == 1
    # 0.04 * 10% = 0.004 -> 0.00
    assert calculate_commission(4, 10) == 0
    # 1.01 * 12.5% = 0.12625 -> 0.13
    assert calculate_commission(101, 12.5) == 13


def test_commission_full_and_zero_rate():
    assert calculate_commission(12345, 100) == 12345
    assert calculate_commission(12345, 0) == 0


@pytest.mark.parametrize("rate", [-1, 100.01, "10", None])
def test_invalid_rate_rejected(rate):
    with pytest.raises(InvalidCommissionRateError):
        validate_commission_rate(rate)


def test_resolve_rate_defaults_to_zero_for_missing_user():
    users = {"op-1": User("op-1", "Bruno", "bruno", "operator", 20.0, "admin-1")}

    assert resolve_commission_rate(users, "op-1") == 20.0
    assert resolve_commission_rate(users, "deleted-op") == 0.0


def test_resolve_rate_is_inert_for_admins():
    users = {"admin-1": User("admin-1", "Ana", "ana", "admin", 50.0)}
    assert resolve_commission_rate(users, "admin-1") == 0.0
