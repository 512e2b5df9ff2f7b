"""
=============================================================================
Gas Adjuster Service - Main Application (app.py)
=============================================================================

Runs the gas adjuster of the Ethereum sender as a small FastAPI service.

Startup:
  1. Resolve the process-wide parameters source (``GAS_PARAMETERS_SOURCE``).
     The fixed source is refused on a deployed node (``DEPLOYED=true``).
  2. Read both tunables once, so a misconfigured node fails at startup
     instead of running with an undefined gas ceiling.
  3. Wait for the JSON-RPC endpoint, build the ``GasAdjuster`` and run one
     update so the maximum gas price is known before the first request.
  4. Schedule ``GasAdjuster.keep_updated`` every ``GAS_ADJUSTER_TICK_SECONDS``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
import routes
from config_options import Misconfiguration
from errors import error_response
from gas_adjuster import GasAdjuster, check_scale_factor
from parameters import get_parameters

# =============================================================================
# Logging
# =============================================================================

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("eth-gas")

# Set 3rd party loggers to WARNING to reduce noise if DEBUG is on
if config.LOG_LEVEL == "DEBUG":
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("web3").setLevel(logging.WARNING)


# =============================================================================
# Startup
# =============================================================================


def _startup() -> dict:
    """Build the components the lifespan wires up."""
    from chain import get_chain

    parameters = get_parameters()

    # 1. Fixed values are for tests only
    if parameters.name == "fixed" and config.DEPLOYED:
        logger.critical(
            "GAS_PARAMETERS_SOURCE=fixed is forbidden when DEPLOYED=true. "
            "Refusing to start."
        )
        raise Misconfiguration(
            "GAS_PARAMETERS_SOURCE",
            "fixed parameters cannot be used on a deployed node",
            parameters.name,
        )

    # 2. Fail fast on missing / malformed tunables
    interval = parameters.get_renewal_interval()
    scale = check_scale_factor(parameters)
    logger.info(
        f"Gas parameters ({parameters.name}): renewal interval {interval.total_seconds():.0f}s, "
        f"scale factor {scale}"
    )

    # 3. RPC and adjuster
    chain = get_chain()
    try:
        chain.wait_for_rpc(timeout=config.RPC_WAIT_TIMEOUT_SECONDS)
    except Exception as exc:
        logger.warning(f"RPC wait skipped/failed: {exc}")

    gas_adjuster = GasAdjuster(chain, parameters)
    try:
        gas_adjuster.keep_updated()
    except Misconfiguration:
        raise
    except Exception as exc:
        logger.warning(f"Initial gas adjuster update failed: {exc}")

    return {
        "chain": chain,
        "parameters": parameters,
        "gas_adjuster": gas_adjuster,
    }


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup / shutdown lifecycle."""
    logger.info(f"=== Gas adjuster starting (source={config.GAS_PARAMETERS_SOURCE}) ===")

    components = _startup()
    routes.init(
        gas_adjuster=components["gas_adjuster"],
        parameters=components["parameters"],
    )

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        components["gas_adjuster"].keep_updated,
        "interval",
        seconds=config.GAS_ADJUSTER_TICK_SECONDS,
    )
    scheduler.start()
    logger.info("=== Gas adjuster started successfully ===")

    yield

    # Shutdown
    scheduler.shutdown(wait=False)
    logger.info("=== Gas adjuster shutdown ===")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Eth Gas Adjuster",
    description="Gas price suggestions and max gas price for the Ethereum sender",
    version="1.0.0",
    lifespan=lifespan,
)
app.include_router(routes.router)


@app.exception_handler(Misconfiguration)
async def _misconfiguration_handler(request: Request, exc: Misconfiguration):
    logger.error(f"Misconfiguration while serving {request.url.path}: {exc}")
    return error_response(503, exc)


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, exc.detail)


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    ]
    return error_response(422, {"code": "validation_error", "message": "; ".join(problems)})


# =============================================================================
# Development Entry Point
# =============================================================================

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=config.SERVICE_PORT)
