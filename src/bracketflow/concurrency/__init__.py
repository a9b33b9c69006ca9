from .acquire_release import AcquireFunc, Exit, ReleaseFunc, Step, resolve
from .builder import Builder, create_bracket, create_scope, create_transaction
from .errors import AggregateError, DuplicateTagError, TransactionError
from .transaction import Transaction

__all__ = [
    "AcquireFunc",
    "AggregateError",
    "Builder",
    "DuplicateTagError",
    "Exit",
    "ReleaseFunc",
    "Step",
    "Transaction",
    "TransactionError",
    "create_bracket",
    "create_scope",
    "create_transaction",
    "resolve",
]
