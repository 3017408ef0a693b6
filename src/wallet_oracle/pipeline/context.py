from __future__ import annotations

from dataclasses import dataclass, field

from ..adapters.price_adapters import PriceQuote
from ..fetch import BalanceFetcher, BalanceOutcome, CachePolicy, PriceFetcher
from ..state import AppState


@dataclass
class PipelineContext:
    state: AppState
    policy: CachePolicy = CachePolicy.WRITE_AFTER_FETCH
    balance_fetcher: BalanceFetcher | None = None
    price_fetcher: PriceFetcher | None = None
    balances: dict[str, BalanceOutcome] = field(default_factory=dict)
    prices: PriceQuote | None = None
    price_error: Exception | None = None

    def __post_init__(self) -> None:
        s = self.state.settings
        if self.balance_fetcher is None:
            self.balance_fetcher = BalanceFetcher(s, self.state.cache)
        if self.price_fetcher is None:
            self.price_fetcher = PriceFetcher(s, self.state.cache)

    @property
    def balance_fetcher_required(self) -> BalanceFetcher:
        if self.balance_fetcher is None:
            raise RuntimeError("Balance fetcher has not been set.")
        return self.balance_fetcher

    @property
    def price_fetcher_required(self) -> PriceFetcher:
        if self.price_fetcher is None:
            raise RuntimeError("Price fetcher has not been set.")
        return self.price_fetcher

    @property
    def prices_required(self) -> PriceQuote:
        if self.prices is None:
            raise RuntimeError(
                "Prices have not been set. Ensure refresh_prices() is called before accessing this property."
            )
        return self.prices
