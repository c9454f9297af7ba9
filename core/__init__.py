"""
Shared plumbing for the Seller Pro services

- Error taxonomy shared by every workflow
- Settings loaded from the environment
- Loguru logging setup
- Versioned JSON blob persistence
"""

from .errors import (
    SellerProError,
    NotFoundError,
    InactiveRewardError,
    InsufficientBalanceError,
    AlreadyInvitedError,
    AlreadyProcessedError,
    InvalidTransitionError,
    MissingFieldError,
    SchemaVersionError,
    InvalidAmountError,
)

__all__ = [
    "SellerProError",
    "NotFoundError",
    "InactiveRewardError",
    "InsufficientBalanceError",
    "AlreadyInvitedError",
    "AlreadyProcessedError",
    "InvalidTransitionError",
    "MissingFieldError",
    "SchemaVersionError",
    "InvalidAmountError",
]
