"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .cache import CacheStore
from .settings import WalletSettings


@dataclass
class AppState:
    """Container for application-wide state and dependencies.

    Passed through the pipeline to avoid global state and enable testing.
    The cache handle is opened once at startup and shared by every fetch.
    """

    settings: WalletSettings
    logger: logging.Logger
    cache: CacheStore
