"""
=============================================================================
Gas Adjuster Parameters (parameters.py)
=============================================================================

Configurable parameters of the gas adjuster:

- Maximum gas price renewal interval: time between updates of the upper
  limit for the gas price suggested by ``GasAdjuster``.
- Maximum gas price scale: multiplier applied to the average gas price to
  calculate that upper limit.

Values come from a ``ParametersSource``.  ``EnvParameters`` reads the
environment on every call; ``FixedParameters`` returns hard-coded values so
dependent logic is deterministic in tests.  One source is selected per
process from ``config.GAS_PARAMETERS_SOURCE`` and never swapped afterwards.

Neither source caches anything: an administrator may change the settings of
an already running node when the existing ones no longer match the current
network price.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta

import config
from config_options import Misconfiguration, parse_env, parse_env_seconds


class ParametersSource(ABC):
    """Backing source for the gas adjuster tunables."""

    name: str = ""

    @abstractmethod
    def get_renewal_interval(self) -> timedelta:
        raise NotImplementedError

    @abstractmethod
    def get_scale_factor(self) -> float:
        raise NotImplementedError


class EnvParameters(ParametersSource):
    """Reads both settings from the process environment on each call."""

    name = "env"

    def __init__(
        self,
        interval_var: str = config.MAX_GAS_PRICE_RENEWAL_INTERVAL_VAR,
        scale_var: str = config.MAX_GAS_PRICE_SCALE_FACTOR_VAR,
    ):
        self.interval_var = interval_var
        self.scale_var = scale_var

    def get_renewal_interval(self) -> timedelta:
        return parse_env_seconds(self.interval_var)

    def get_scale_factor(self) -> float:
        return parse_env(self.scale_var, float)


class FixedParameters(ParametersSource):
    """Zero renewal interval and a 1.5 scale factor, never read from anywhere."""

    name = "fixed"

    def get_renewal_interval(self) -> timedelta:
        return timedelta(seconds=config.FIXED_RENEWAL_INTERVAL_SECONDS)

    def get_scale_factor(self) -> float:
        return config.FIXED_SCALE_FACTOR


_SOURCES = {
    EnvParameters.name: EnvParameters,
    FixedParameters.name: FixedParameters,
}


def source_from_name(name: str) -> ParametersSource:
    """Build the source registered under ``name`` ("env" or "fixed")."""
    try:
        return _SOURCES[name]()
    except KeyError:
        raise Misconfiguration(
            "GAS_PARAMETERS_SOURCE",
            f"unknown parameters source, expected one of {sorted(_SOURCES)}",
            name,
        ) from None


# =============================================================================
# Process-wide source
# =============================================================================

_source: ParametersSource = source_from_name(config.GAS_PARAMETERS_SOURCE)


def get_parameters() -> ParametersSource:
    """Return the source selected for this process."""
    return _source


def get_renewal_interval() -> timedelta:
    """
    Obtain the interval for renewing the maximum gas price.

    Re-read on every call; raises ``Misconfiguration`` when the backing
    setting is missing or malformed.
    """
    return _source.get_renewal_interval()


def get_scale_factor() -> float:
    """
    Obtain the scaling factor for the maximum gas price.

    Re-read on every call; raises ``Misconfiguration`` when the backing
    setting is missing or malformed.
    """
    return _source.get_scale_factor()
