"""
Sweep configuration.

Defaults can be overridden from the environment; CLI flags override both:

  BSTCHECK_SEED=<int>             sweep seed (default 0)
  BSTCHECK_TRIALS=<int>           cases per property (default 100)
  BSTCHECK_TIMEOUT=<float>        per-trial guard in seconds, 0 disables (default 5)
  BSTCHECK_CANDIDATES_DIR=<path>  extra directory of implementation files
  BSTCHECK_ADD_SCHEMA_FIELDS=1    add kind + schema_version to --json output

There are no config files and nothing persists between runs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from bstcheck.core import case_gen
from bstcheck.core.shrink import DEFAULT_MAX_STEPS

ENV_SEED = "BSTCHECK_SEED"
ENV_TRIALS = "BSTCHECK_TRIALS"
ENV_TIMEOUT = "BSTCHECK_TIMEOUT"
ENV_CANDIDATES_DIR = "BSTCHECK_CANDIDATES_DIR"
ENV_SCHEMA_FIELDS = "BSTCHECK_ADD_SCHEMA_FIELDS"

_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_SEED = 0
DEFAULT_TRIALS = 100
DEFAULT_TIMEOUT_S = 5.0


@dataclass(frozen=True)
class SweepConfig:
    seed: int = DEFAULT_SEED
    trials: int = DEFAULT_TRIALS
    min_length: int = case_gen.DEFAULT_MIN_LENGTH
    max_length: int = case_gen.DEFAULT_MAX_LENGTH
    min_value: int = case_gen.DEFAULT_MIN_VALUE
    max_value: int = case_gen.DEFAULT_MAX_VALUE
    timeout_s: Optional[float] = DEFAULT_TIMEOUT_S
    shrink: bool = True
    max_shrink_steps: int = DEFAULT_MAX_STEPS
    extended: bool = False
    candidates_dir: Optional[str] = None
    schema_fields: bool = False

    def __post_init__(self) -> None:
        if self.trials <= 0:
            raise ValueError(f"trials must be > 0, got {self.trials}")
        if self.min_length < 0 or self.max_length < self.min_length:
            raise ValueError(
                f"length bounds must satisfy 0 <= min <= max, got [{self.min_length}, {self.max_length}]"
            )
        if self.max_value < self.min_value:
            raise ValueError(
                f"value bounds must satisfy min <= max, got [{self.min_value}, {self.max_value}]"
            )
        if self.timeout_s is not None and self.timeout_s < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout_s}")
        if self.max_shrink_steps < 0:
            raise ValueError(f"max_shrink_steps must be >= 0, got {self.max_shrink_steps}")

    @property
    def guard_timeout(self) -> Optional[float]:
        """Timeout to hand to the guard; None when disabled."""
        if not self.timeout_s:
            return None
        return self.timeout_s

    def with_overrides(self, **changes) -> "SweepConfig":
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _env_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> SweepConfig:
    env = os.environ if environ is None else environ
    return SweepConfig(
        seed=_env_int(env, ENV_SEED, DEFAULT_SEED),
        trials=_env_int(env, ENV_TRIALS, DEFAULT_TRIALS),
        timeout_s=_env_float(env, ENV_TIMEOUT, DEFAULT_TIMEOUT_S),
        candidates_dir=env.get(ENV_CANDIDATES_DIR, "").strip() or None,
        schema_fields=env.get(ENV_SCHEMA_FIELDS, "").strip().lower() in _TRUTHY,
    )
