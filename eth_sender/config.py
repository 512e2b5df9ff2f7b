"""eth_sender/config.py

Centralized configuration for the gas adjuster service.

Most values are plain constants.  A handful of deployment knobs can be
overridden from the environment when the module is imported; those are
parsed with ``config_options`` so a malformed override stops the process
instead of being silently ignored.

The two gas adjuster tunables (renewal interval and scale factor) are NOT
read here: they are re-read on every access by ``parameters.py`` so that an
administrator can change them on a running node.
"""

from __future__ import annotations

import os

from config_options import parse_env_if_exists, positive_int

# =============================================================================
# Environment Detection
# =============================================================================

# LOG_LEVEL:
# Controls the verbosity of application logging.
# - DEBUG: Every network price sample and renewal decision.
# - INFO:  Standard production level, logs startup and max gas price renewals.
#
# Used in: app.py (logging.basicConfig)
LOG_LEVEL: str = (os.getenv("LOG_LEVEL", "") or "INFO").strip().upper()

# DEPLOYED:
# Marks a process as a real deployment, determined by the `DEPLOYED` env var.
# - True (default): only the environment-backed parameters source is allowed.
# - False (local development / tests): the fixed parameters source may be used.
#
# Used in: app.py (startup guard)
_deployed = parse_env_if_exists("DEPLOYED", bool)
DEPLOYED: bool = True if _deployed is None else _deployed  # Safe default

# GAS_PARAMETERS_SOURCE:
# Selects the backing source of the gas adjuster tunables for the whole process.
# - "env":   read ETH_MAX_GAS_PRICE_* variables on every access.
# - "fixed": hard-coded values, for deterministic tests.
#
# Used in: parameters.py (process-wide source selection)
GAS_PARAMETERS_SOURCE: str = (os.getenv("GAS_PARAMETERS_SOURCE", "") or "env").strip().lower()

# =============================================================================
# Gas Adjuster Tunables
# =============================================================================

# MAX_GAS_PRICE_RENEWAL_INTERVAL_VAR:
# Name of the environment variable holding the interval, in whole seconds,
# between recomputations of the maximum gas price.
#
# Used in: parameters.py (EnvParameters)
MAX_GAS_PRICE_RENEWAL_INTERVAL_VAR: str = "ETH_MAX_GAS_PRICE_RENEWAL_INTERVAL"

# MAX_GAS_PRICE_SCALE_FACTOR_VAR:
# Name of the environment variable holding the multiplier applied to the
# average gas price to obtain the maximum gas price.
#
# Used in: parameters.py (EnvParameters)
MAX_GAS_PRICE_SCALE_FACTOR_VAR: str = "ETH_MAX_GAS_PRICE_SCALE_FACTOR"

# FIXED_RENEWAL_INTERVAL_SECONDS / FIXED_SCALE_FACTOR:
# Values returned by the fixed source.  A zero interval means the maximum
# gas price is recomputed on every adjuster tick.
#
# Used in: parameters.py (FixedParameters)
FIXED_RENEWAL_INTERVAL_SECONDS: int = 0
FIXED_SCALE_FACTOR: float = 1.5

# =============================================================================
# Chain
# =============================================================================

# CHAIN_ID:
# The Ethereum Chain ID the sender submits to.  Informational; reported on /gas.
CHAIN_ID: int = 1

# DEFAULT_RPC_URL:
# JSON-RPC endpoint used when neither an explicit URL nor ETH_CLIENT_WEB3_URL
# is given.
#
# Used in: chain.py (Chain endpoint selection)
DEFAULT_RPC_URL: str = "http://127.0.0.1:8545"

# RPC_WAIT_TIMEOUT_SECONDS:
# How long startup waits for the RPC endpoint before continuing anyway.
#
# Used in: app.py (lifespan)
RPC_WAIT_TIMEOUT_SECONDS: int = 60

# =============================================================================
# Gas Adjuster Scheduling
# =============================================================================

# GAS_ADJUSTER_TICK_SECONDS:
# How often the background scheduler samples the network gas price.
# Renewal of the maximum price happens on a tick once the renewal interval
# has elapsed, so the effective renewal granularity is this value.
#
# Used in: app.py (BackgroundScheduler interval)
_tick = parse_env_if_exists("GAS_ADJUSTER_TICK_SECONDS", positive_int)
GAS_ADJUSTER_TICK_SECONDS: int = 15 if _tick is None else _tick

# GAS_PRICE_SAMPLES_AMOUNT:
# Number of most recent network price samples averaged when renewing the
# maximum gas price.
#
# Used in: gas_adjuster.py (GasStatistics window)
GAS_PRICE_SAMPLES_AMOUNT: int = 10

# REPLACEMENT_PRICE_BUMP_PERCENT:
# Minimum increase over the previous gas price when re-submitting a stuck
# transaction.  Nodes reject replacements below roughly 10%.
#
# Used in: gas_adjuster.py (GasAdjuster.get_gas_price)
REPLACEMENT_PRICE_BUMP_PERCENT: int = 15

# =============================================================================
# Networking
# =============================================================================

# SERVICE_PORT:
# Port the status API listens on when started via `python app.py`.
_port = parse_env_if_exists("SERVICE_PORT", positive_int)
SERVICE_PORT: int = 8000 if _port is None else _port
