"""
conftest.py — make the eth_sender modules importable and select the test
configuration before anything imports them.
"""

import os
import sys
from pathlib import Path

# Add the eth_sender directory to sys.path so test modules can import
# modules directly (e.g. `from gas_adjuster import GasAdjuster`).
sender_dir = Path(__file__).resolve().parent.parent / "eth_sender"
if str(sender_dir) not in sys.path:
    sys.path.insert(0, str(sender_dir))

# The test process runs with hard-coded gas parameters.
os.environ["GAS_PARAMETERS_SOURCE"] = "fixed"
os.environ["DEPLOYED"] = "false"
