"""
=============================================================================
Gas Adjuster API Routes (routes.py)
=============================================================================

Read-only HTTP surface of the gas adjuster.

Endpoints:
    /health       GET  – health check
    /gas          GET  – max gas price state and the live tunables
    /gas/price    GET  – suggested gas price (optional ?previous=<wei>)

A ``Misconfiguration`` raised while reading the tunables is turned into a
503 response by the handler registered in app.py.
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Query

import config

if TYPE_CHECKING:
    from gas_adjuster import GasAdjuster
    from parameters import ParametersSource

logger = logging.getLogger("eth-gas.routes")

# =============================================================================
# Shared references (set by app.py at startup)
# =============================================================================

_gas_adjuster: Optional["GasAdjuster"] = None
_parameters: Optional["ParametersSource"] = None


def init(*, gas_adjuster, parameters):
    global _gas_adjuster, _parameters
    _gas_adjuster = gas_adjuster
    _parameters = parameters
    logger.info("Routes module initialized")


def _require_initialized() -> tuple["GasAdjuster", "ParametersSource"]:
    if _gas_adjuster is None or _parameters is None:
        raise HTTPException(status_code=503, detail={"error": "Service unavailable", "reason": "initializing"})
    return _gas_adjuster, _parameters


router = APIRouter(tags=["gas"])


@router.get("/health")
def health_check():
    return {"status": "healthy"}


@router.get("/gas")
def gas_status():
    adjuster, parameters = _require_initialized()
    return {
        "chain_id": config.CHAIN_ID,
        **adjuster.status(),
        "parameters": {
            "source": parameters.name,
            "renewal_interval_seconds": int(parameters.get_renewal_interval().total_seconds()),
            "scale_factor": parameters.get_scale_factor(),
        },
    }


@router.get("/gas/price")
def suggest_gas_price(previous: Optional[int] = Query(default=None, ge=0)):
    adjuster, _ = _require_initialized()
    return {
        "gas_price": adjuster.get_gas_price(previous),
        "max_gas_price": adjuster.max_gas_price,
    }
