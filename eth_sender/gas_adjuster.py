"""
=============================================================================
Gas Adjuster (gas_adjuster.py)
=============================================================================

Suggests gas prices for outgoing transactions and keeps an upper bound on
them.

The bound (``max_gas_price``) is the average of recently observed network
prices multiplied by the scale factor.  It is recomputed on an adjuster tick
once the renewal interval has elapsed since the previous recomputation.
Both tunables come from a ``ParametersSource`` and are read again on every
tick, so an administrator can retune a running node.

Threading: ``keep_updated`` runs on the scheduler thread while HTTP handlers
call ``get_gas_price`` / ``status``; shared state is guarded by a lock.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from typing import Callable, Deque, Optional

import config
from chain import Chain
from config_options import Misconfiguration
from parameters import ParametersSource, get_parameters

logger = logging.getLogger("eth-gas.gas_adjuster")


def check_scale_factor(parameters: ParametersSource) -> float:
    """Read the scale factor and reject values that cannot bound the gas price."""
    scale = parameters.get_scale_factor()
    if not math.isfinite(scale) or scale <= 0:
        name = getattr(parameters, "scale_var", config.MAX_GAS_PRICE_SCALE_FACTOR_VAR)
        raise Misconfiguration(name, "scale factor must be a positive finite number", str(scale))
    return scale


class GasStatistics:
    """Rolling window of observed gas prices (wei)."""

    def __init__(self, max_samples: int = config.GAS_PRICE_SAMPLES_AMOUNT):
        if max_samples <= 0:
            raise ValueError("max_samples must be positive")
        self._samples: Deque[int] = deque(maxlen=max_samples)

    def add_sample(self, price: int) -> None:
        self._samples.append(int(price))

    def average_price(self) -> Optional[int]:
        if not self._samples:
            return None
        return sum(self._samples) // len(self._samples)

    def __len__(self) -> int:
        return len(self._samples)


class GasAdjuster:
    def __init__(
        self,
        chain: Chain,
        parameters: Optional[ParametersSource] = None,
        *,
        max_samples: int = config.GAS_PRICE_SAMPLES_AMOUNT,
        price_bump_percent: int = config.REPLACEMENT_PRICE_BUMP_PERCENT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.chain = chain
        self.parameters = parameters if parameters is not None else get_parameters()
        self.statistics = GasStatistics(max_samples)
        self.price_bump_percent = price_bump_percent
        self._clock = clock
        self._lock = threading.Lock()
        self._max_gas_price: Optional[int] = None
        self._last_renewal: Optional[float] = None

    @property
    def max_gas_price(self) -> Optional[int]:
        with self._lock:
            return self._max_gas_price

    # ------------------------------------------------------------------
    # Periodic update
    # ------------------------------------------------------------------

    def keep_updated(self) -> None:
        """
        Sample the network price and renew the maximum gas price if due.

        Raises ``Misconfiguration`` if a tunable cannot be read or the
        scale factor is not a positive finite number; the previous maximum
        stays in place.
        """
        price = self.chain.get_gas_price()
        now = self._clock()
        with self._lock:
            self.statistics.add_sample(price)
            logger.debug(f"Gas price sample: {price} wei ({len(self.statistics)} samples)")
            if self._renewal_due(now):
                self._renew(now)

    def _renewal_due(self, now: float) -> bool:
        if self._last_renewal is None:
            return True
        interval = self.parameters.get_renewal_interval()
        return now - self._last_renewal >= interval.total_seconds()

    def _renew(self, now: float) -> None:
        average = self.statistics.average_price()
        if average is None:
            return
        scale = check_scale_factor(self.parameters)
        self._max_gas_price = int(average * scale)
        self._last_renewal = now
        logger.info(
            f"Max gas price renewed: {self._max_gas_price} wei "
            f"(average {average} wei x {scale})"
        )

    # ------------------------------------------------------------------
    # Price suggestion
    # ------------------------------------------------------------------

    def get_gas_price(self, previous: Optional[int] = None) -> int:
        """
        Suggest a gas price for a transaction.

        For a replacement of a stuck transaction pass the ``previous`` price;
        the suggestion is then raised by at least ``price_bump_percent``.
        The result never exceeds the current maximum gas price.
        """
        price = self.chain.get_gas_price()
        if previous is not None:
            bumped = previous * (100 + self.price_bump_percent) // 100
            price = max(price, bumped)

        ceiling = self.max_gas_price
        if ceiling is not None and price > ceiling:
            logger.warning(f"Suggested gas price {price} wei capped to {ceiling} wei")
            price = ceiling
        return price

    def status(self) -> dict:
        with self._lock:
            last = self._last_renewal
            return {
                "max_gas_price": self._max_gas_price,
                "average_price": self.statistics.average_price(),
                "samples": len(self.statistics),
                "seconds_since_renewal": None if last is None else round(self._clock() - last, 3),
            }
