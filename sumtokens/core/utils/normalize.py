"""Canonical forms for owner addresses and token ids, per chain."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sumtokens.core.constants.base import PAIR_SEPARATOR
from sumtokens.core.constants.chains import (
    CASE_SENSITIVE_CHAINS,
    IBC_CHAINS,
    LOWERCASE_HEX_CHAINS,
)


def normalize_address(chain: str | None, value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    addr = str(value).strip()
    if not addr or chain in CASE_SENSITIVE_CHAINS:
        return addr
    if chain in IBC_CHAINS:
        # bech32 addresses are case-insensitive; denoms such as ibc/<HASH> are not
        return addr if "/" in addr else addr.lower()
    if chain in LOWERCASE_HEX_CHAINS or addr[:2].lower() == "0x":
        return addr.lower()
    return addr


def _dedupe(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def get_unique_addresses(items: Iterable[Any] | None, chain: str | None) -> list[str]:
    return _dedupe(normalize_address(chain, item) for item in items or [])


def get_unique_tokens_and_owners(
    pairs: Iterable[tuple[Any, Any] | list[Any]] | None, chain: str | None
) -> list[tuple[str, str]]:
    keys = _dedupe(
        PAIR_SEPARATOR.join(
            (normalize_address(chain, token), normalize_address(chain, owner))
        )
        for token, owner in pairs or []
    )
    out: list[tuple[str, str]] = []
    for key in keys:
        token, owner = key.split(PAIR_SEPARATOR, 1)
        out.append((token, owner))
    return out
