from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from fractions import Fraction

Ledger = dict[str, int]


def to_raw_int(amount: int | str | Decimal | Fraction) -> int:
    """Coerce an amount to an int, truncating toward zero."""
    if isinstance(amount, bool):
        raise ValueError(f"Invalid amount: {amount!r}")
    if isinstance(amount, int):
        return amount
    if isinstance(amount, Fraction):
        return int(amount)
    try:
        dec = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {amount!r}") from exc
    return int(dec.to_integral_value(rounding=ROUND_DOWN))


def sum_single_balance(
    ledger: Ledger, token: str, amount: int | str | Decimal | Fraction
) -> Ledger:
    value = to_raw_int(amount)
    if value < 0:
        raise ValueError(f"Negative amount {value} for token {token}")
    ledger[token] = ledger.get(token, 0) + value
    return ledger


def merge_balances(target: Ledger, *others: Ledger) -> Ledger:
    for other in others:
        for token, amount in other.items():
            sum_single_balance(target, token, amount)
    return target


def sum_chain_tvls(*ledgers: Ledger) -> Ledger:
    return merge_balances({}, *ledgers)


def remove_zero_balances(ledger: Ledger) -> Ledger:
    for token in [t for t, amount in ledger.items() if not amount]:
        del ledger[token]
    return ledger
