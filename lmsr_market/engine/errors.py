"""
Error taxonomy for the market engine.

Every failure is raised synchronously and aborts the whole operation before any
state is mutated. Callers retry by re-quoting; nothing in the engine retries.
"""


class MarketError(Exception):
    """Base class for all engine errors."""


# Validation

class ValidationError(MarketError, ValueError):
    pass


class ZeroAmountError(ValidationError):
    pass


class FeeOutOfBoundsError(ValidationError):
    pass


class UnchangedValueError(ValidationError):
    pass


class AssetMismatchError(ValidationError):
    pass


class InvalidLiquidityError(ValidationError):
    pass


class UnknownOutcomeError(ValidationError):
    pass


class OutcomeMismatchError(ValidationError):
    """Redeemed asset is not backed by the winning outcome."""


# Authorization

class AuthorizationError(MarketError):
    pass


# Lifecycle state

class StateError(MarketError):
    pass


class MarketPausedError(StateError):
    pass


class MarketNotPausedError(StateError):
    pass


class MarketResolvedError(StateError):
    pass


class MarketNotResolvedError(StateError):
    pass


class MarketClosedError(StateError):
    pass


class OutstandingSupplyError(StateError):
    pass


# Economic guards

class EconomicError(MarketError):
    pass


class SlippageError(EconomicError):
    pass


class InsufficientPaymentError(EconomicError):
    pass


class UnderflowError(EconomicError):
    pass


class FixedPointOverflowError(EconomicError, OverflowError):
    pass


class DomainError(EconomicError, ValueError):
    pass


class InsufficientSupplyError(EconomicError):
    pass


class InsufficientCollateralError(EconomicError):
    pass


class InsufficientFeeBalanceError(EconomicError):
    pass


class OutcomeIndexError(EconomicError, IndexError):
    pass


# Snapshots

class SnapshotError(MarketError):
    pass


class InvalidSnapshotError(SnapshotError):
    pass


class DuplicateEntryError(SnapshotError):
    pass


class MarketMismatchError(SnapshotError):
    pass


class OutcomeNotFoundError(SnapshotError):
    pass


class SnapshotConsumedError(SnapshotError):
    pass
