from typing import Any

from pydantic import BaseModel, Field, field_validator


def _as_id(value: Any) -> Any:
    # asset ids are often given as ints; the ledger keys on strings
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class SumTokensRequest(BaseModel):
    chain: str | None = None
    owner: str | None = None
    owners: list[str] = Field(default_factory=list)
    token: str | None = None
    tokens: list[str] = Field(default_factory=list)
    tokens_and_owners: list[tuple[str, str]] = Field(default_factory=list)
    blacklisted_tokens: list[str] = Field(default_factory=list)
    block: int | str | None = None
    balances: dict[str, int] = Field(
        default_factory=dict,
        description=(
            "Pre-seeded ledger; adapters sum their results into a copy of it. "
            "Blacklisted ids are dropped from the copy."
        ),
    )
    # (lp asset id, hint asset id) pairs to decompose into pool reserves
    lp_positions: list[tuple[str, str | None]] = Field(default_factory=list)
    blacklist_on_lp_as_well: bool = True

    @field_validator("owner", "token", mode="before")
    @classmethod
    def _coerce_single(cls, v: Any) -> Any:
        return _as_id(v)

    @field_validator("owners", "tokens", "blacklisted_tokens", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> Any:
        if v is None:
            return []
        return [_as_id(i) for i in v]

    @field_validator("tokens_and_owners", "lp_positions", mode="before")
    @classmethod
    def _coerce_pairs(cls, v: Any) -> Any:
        if v is None:
            return []
        return [tuple(_as_id(i) for i in pair) for pair in v]
