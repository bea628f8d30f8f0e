"""Runtime configuration.

Values come from constructor arguments or, via :meth:`EngineConfig.from_env`,
from environment variables (optionally loaded from a ``.env`` file):

- ``SPAM_BAYES_ALPHAS``: comma-separated smoothing candidates.
- ``SPAM_BAYES_ALPHA``: smoothing constant used when no sweep is run.
- ``SPAM_BAYES_LOG_LEVEL``: logging level name for the CLI.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .tuning import DEFAULT_ALPHAS

ENV_PREFIX = "SPAM_BAYES_"


def parse_alphas(value: str) -> tuple[float, ...]:
    """Parse ``"0.1, 0.5,1"`` into ``(0.1, 0.5, 1.0)``.

    Raises:
        ValueError: If any item is not a number.
    """
    items = [item.strip() for item in value.split(",") if item.strip()]
    try:
        return tuple(float(item) for item in items)
    except ValueError as exc:
        raise ValueError(f"Invalid alpha list {value!r}: {exc}") from exc


def _valid_alpha(value: float) -> bool:
    return math.isfinite(value) and value >= 0


@dataclass
class EngineConfig:
    """Settings for training, tuning and logging.

    Args:
        alphas: Smoothing candidates for the validation sweep, tried in order.
        default_alpha: Smoothing constant used without a sweep.
        log_level: Logging level name (``DEBUG``, ``INFO``, ...).
    """

    alphas: tuple[float, ...] = DEFAULT_ALPHAS
    default_alpha: float = 1.0
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.alphas = tuple(float(a) for a in self.alphas)
        if not self.alphas:
            raise ValueError("alphas must contain at least one value")
        if not all(_valid_alpha(a) for a in self.alphas):
            raise ValueError(f"alphas must be finite and non-negative, got {self.alphas}")
        if not _valid_alpha(self.default_alpha):
            raise ValueError(
                f"default_alpha must be finite and non-negative, got {self.default_alpha}"
            )

        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, env_file: Optional[str | Path] = None) -> "EngineConfig":
        """Build a config from ``SPAM_BAYES_*`` environment variables.

        A ``.env`` file is loaded first (``env_file``, or whatever
        ``python-dotenv`` discovers); variables already set in the
        environment take precedence.
        """
        load_dotenv(dotenv_path=env_file)

        kwargs: dict = {}
        alphas = os.getenv(f"{ENV_PREFIX}ALPHAS")
        if alphas:
            kwargs["alphas"] = parse_alphas(alphas)
        alpha = os.getenv(f"{ENV_PREFIX}ALPHA")
        if alpha:
            try:
                kwargs["default_alpha"] = float(alpha)
            except ValueError as exc:
                raise ValueError(f"Invalid {ENV_PREFIX}ALPHA {alpha!r}") from exc
        log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if log_level:
            kwargs["log_level"] = log_level

        return cls(**kwargs)
