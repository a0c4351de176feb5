"""Environment configuration for walletwise.

All settings are read from the process environment once, at startup, by
the CLI entry point and then passed down explicitly.
"""

import os
from typing import Mapping, Optional

DB_PATH_ENV = "WALLETWISE_DB_PATH"
STRICT_BALANCE_ENV = "WALLETWISE_STRICT_BALANCE"
LOG_LEVEL_ENV = "WALLETWISE_LOG_LEVEL"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def read_strict_mode(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when strict overdraft prevention is enabled.

    Unset or unrecognized values mean non-strict mode.
    """
    environ = os.environ if environ is None else environ
    return environ.get(STRICT_BALANCE_ENV, "").strip().lower() in _TRUE_VALUES

