"""Custom exceptions for the AMM client."""


class AmmClientError(Exception):
    """Base exception for all AMM client errors."""

    pass


class ConfigurationError(AmmClientError):
    """Raised when a required named value is missing or malformed."""

    def __init__(self, message: str, name: str = ""):
        self.name = name
        super().__init__(message)

    @classmethod
    def missing(cls, name: str) -> "ConfigurationError":
        return cls(f"Missing configuration: {name}", name)

    @classmethod
    def invalid(cls, name: str, value: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration {name}={value!r}: {reason}", name)


class DerivationError(AmmClientError):
    """Base exception for program address derivation failures."""

    pass


class DerivationExhaustedError(DerivationError):
    """Raised when no bump in 0..255 yields an off-curve address."""

    def __init__(self, program_id: str):
        self.program_id = program_id
        super().__init__(
            f"Unable to find a viable program address bump seed for program {program_id}"
        )


class InvalidSeedError(DerivationError):
    """Raised when seeds exceed the ledger's count or length limits."""

    def __init__(self, message: str):
        super().__init__(f"Invalid seeds: {message}")


class TransactionRejectedError(AmmClientError):
    """Raised when the remote node or program rejects a transaction.

    The message is the remote error as received; it is never parsed.
    """

    def __init__(self, message: str, signature: str = ""):
        self.message = message
        self.signature = signature
        super().__init__(f"Transaction rejected: {message}")


class ConfirmationTimeoutError(AmmClientError):
    """Raised when a transaction is not confirmed within the timeout."""

    def __init__(self, signature: str, timeout: float):
        self.signature = signature
        self.timeout = timeout
        super().__init__(f"Transaction {signature} not confirmed after {timeout:g}s")


class AccountNotFoundError(AmmClientError):
    """Raised when an account is not found on-chain."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Account not found: {address}")
