"""Domain layer for walletwise application."""

_SERVICES = {
    "TransactionService": "walletwise.domain.transaction",
    "UserService": "walletwise.domain.user",
    "ActivityRecorder": "walletwise.domain.activity",
    "BalanceLedger": "walletwise.domain.ledger",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain.entities; resolve
# them lazily so importing an entity never drags the services in.
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
