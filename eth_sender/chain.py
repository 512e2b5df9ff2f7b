"""
=============================================================================
Blockchain Interaction (chain.py)
=============================================================================

Thin JSON-RPC helper used by the gas adjuster to observe network gas prices.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Optional

from web3 import Web3

from config import DEFAULT_RPC_URL

logger = logging.getLogger("eth-gas.chain")


# =============================================================================
# Chain (RPC wrapper)
# =============================================================================

class Chain:
    """Low-level RPC helper.  Endpoint: explicit URL > ETH_CLIENT_WEB3_URL > default."""

    RPC_URL_VAR = "ETH_CLIENT_WEB3_URL"

    def __init__(self, rpc_url: Optional[str] = None):
        if rpc_url:
            self.endpoint = rpc_url
        else:
            self.endpoint = os.getenv(self.RPC_URL_VAR, "").strip() or DEFAULT_RPC_URL
        self.w3 = Web3(Web3.HTTPProvider(self.endpoint))

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    def wait_for_rpc(self, timeout: int = 60, poll_interval: float = 5) -> bool:
        """Block until the RPC node answers and is not syncing."""
        start = time.time()
        while time.time() - start < timeout:
            try:
                if self.w3.is_connected() and not self.w3.eth.syncing:
                    logger.info(f"RPC ready at block {self.get_latest_block()}")
                    return True
                logger.info(f"Waiting for RPC at {self.endpoint}...")
            except Exception as exc:
                logger.debug(f"RPC not ready: {exc}")
            time.sleep(poll_interval)
        raise TimeoutError("RPC failed to connect in time")

    # ------------------------------------------------------------------
    # Basic queries
    # ------------------------------------------------------------------

    def get_gas_price(self) -> int:
        """Current network gas price in wei."""
        return int(self.w3.eth.gas_price)

    def get_latest_block(self) -> int:
        return self.w3.eth.block_number


# =============================================================================
# Module-level singleton
# =============================================================================

_chain: Optional[Chain] = None


def get_chain() -> Chain:
    global _chain
    if _chain is None:
        _chain = Chain()
    return _chain
