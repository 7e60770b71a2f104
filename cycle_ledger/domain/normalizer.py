"""Record normalization - turns form inputs into immutable cycles and costs"""

from cycle_ledger.domain.exceptions import InvalidCostInputError, InvalidCycleInputError
from cycle_ledger.domain.models import COST_CATEGORIES, Cost, Cycle, RawCost, RawCycle
from cycle_ledger.utils.date_utils import parse_record_date
from cycle_ledger.utils.money_utils import to_cents

CYCLE_MONEY_FIELDS = ("deposit", "redeposit", "withdraw", "chest", "cooperation")


def _non_negative_cents(value, field_name: str, error_cls) -> int:
    try:
        cents = to_cents(value)
    except ValueError as e:
        raise error_cls(f"{field_name}: {e}") from e
    if cents < 0:
        raise error_cls(f"{field_name} must not be negative (got {value})")
    return cents


def normalize_cycle(raw: RawCycle) -> Cycle:
    """
    Derive invested, return and profit for a cycle.

    invested = deposit + redeposit
    return   = withdraw + chest + cooperation
    profit   = return - invested (may be negative)

    Money is converted to cents with half-up rounding before the sums, so
    profit is exact to 2 decimal places. Negative money and an account
    count below 1 are rejected, never clamped.

    Raises:
        InvalidCycleInputError: negative/unparseable money, accounts < 1
        MalformedDateError: date is not a recognized calendar day
    """
    cents = {
        name: _non_negative_cents(getattr(raw, name), name, InvalidCycleInputError)
        for name in CYCLE_MONEY_FIELDS
    }

    if isinstance(raw.accounts, bool) or not isinstance(raw.accounts, int) or raw.accounts < 1:
        raise InvalidCycleInputError(f"accounts must be an integer >= 1 (got {raw.accounts!r})")

    cycle_date = parse_record_date(raw.date)

    invested = cents["deposit"] + cents["redeposit"]
    returned = cents["withdraw"] + cents["chest"] + cents["cooperation"]

    return Cycle(
        id=raw.id,
        name=raw.name,
        date=cycle_date,
        deposit_cents=cents["deposit"],
        redeposit_cents=cents["redeposit"],
        withdraw_cents=cents["withdraw"],
        chest_cents=cents["chest"],
        cooperation_cents=cents["cooperation"],
        accounts=raw.accounts,
        invested_cents=invested,
        return_cents=returned,
        profit_cents=returned - invested,
        operator_id=raw.operator_id,
        operator_name=raw.operator_name,
        owner_admin_id=raw.owner_admin_id,
    )


def normalize_cost(raw: RawCost) -> Cost:
    """Validate an operating expense and convert its amount to cents"""
    amount = _non_negative_cents(raw.amount, "amount", InvalidCostInputError)

    if raw.category not in COST_CATEGORIES:
        raise InvalidCostInputError(
            f"category must be one of {', '.join(COST_CATEGORIES)} (got {raw.category!r})"
        )
    if not raw.name or not raw.name.strip():
        raise InvalidCostInputError("name is required")

    return Cost(
        id=raw.id,
        name=raw.name.strip(),
        date=parse_record_date(raw.date),
        amount_cents=amount,
        category=raw.category,
        operator_id=raw.operator_id,
        operator_name=raw.operator_name,
        owner_admin_id=raw.owner_admin_id,
    )
