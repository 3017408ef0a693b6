"""Ordered provider fallback: first success wins.

Adapters are tried strictly one after another. Each is attempted at most
once per run; the first result returned ends the run and later adapters are
never called.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

from ..adapters.base import AdapterError, BaseAdapter
from ..logger import get_logger

logger = get_logger(__name__)

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


class ChainExhaustedError(Exception):
    """Every adapter in a chain failed."""

    def __init__(self, label: str, last_error: Exception | None):
        self.label = label
        self.last_error = last_error
        detail = str(last_error) if last_error is not None else "no providers configured"
        super().__init__(f"Failed to get {label}: {detail}")


class FallbackChain(Generic[RequestT, ResultT]):
    """Ordered list of alternative providers for one logical fetch."""

    def __init__(
        self, label: str, adapters: Sequence[BaseAdapter[RequestT, ResultT]]
    ) -> None:
        self.label = label
        self._adapters = list(adapters)

    @property
    def adapters(self) -> list[BaseAdapter[RequestT, ResultT]]:
        return list(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)

    async def run(self, request: RequestT) -> ResultT:
        """Return the first successful adapter result.

        Raises:
            ChainExhaustedError: If every adapter raised ``AdapterError``;
                carries the last failure.
        """
        last_error: AdapterError | None = None
        for position, adapter in enumerate(self._adapters, start=1):
            try:
                result = await adapter.fetch(request)
            except AdapterError as e:
                logger.warning(
                    "%s: provider %d/%d failed: %s",
                    self.label,
                    position,
                    len(self._adapters),
                    e,
                )
                last_error = e
                continue

            if position > 1:
                logger.info(
                    "%s: served by fallback provider %s", self.label, adapter.adapter_name
                )
            return result

        raise ChainExhaustedError(self.label, last_error)
