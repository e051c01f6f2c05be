"""
Error taxonomy for the distributor.

Every exception carries a stable ``code`` so callers can branch on it
without parsing messages.
"""


class ErrorCodes:
    """Stable machine-readable error codes."""

    INVALID_PROOF = "INVALID_PROOF"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    SAME_VALUE = "SAME_VALUE"
    UNAUTHORIZED = "UNAUTHORIZED"
    SHUTDOWN = "SHUTDOWN"
    ALREADY_INITIALIZED = "ALREADY_INITIALIZED"
    NOT_INITIALIZED = "NOT_INITIALIZED"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"


class DistributorError(Exception):
    code = "DISTRIBUTOR_ERROR"
    default_message = "distributor error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"code": self.code, "message": self.message}


class InvalidProof(DistributorError):
    code = ErrorCodes.INVALID_PROOF
    default_message = "invalid proof"


class AlreadyClaimed(InvalidProof):
    """Claimed amount is not above what the claimant already received."""

    code = ErrorCodes.ALREADY_CLAIMED
    default_message = "already claimed"


class SameValue(DistributorError):
    code = ErrorCodes.SAME_VALUE
    default_message = "new value equals the current value"


class Unauthorized(DistributorError):
    code = ErrorCodes.UNAUTHORIZED
    default_message = "caller is not the admin"


class Shutdown(DistributorError):
    code = ErrorCodes.SHUTDOWN
    default_message = "distributor is shut down"


class AlreadyInitialized(DistributorError):
    code = ErrorCodes.ALREADY_INITIALIZED
    default_message = "distributor already initialized"


class NotInitialized(DistributorError):
    code = ErrorCodes.NOT_INITIALIZED
    default_message = "distributor not initialized"


class InsufficientBalance(DistributorError):
    code = ErrorCodes.INSUFFICIENT_BALANCE
    default_message = "vault balance too low"
