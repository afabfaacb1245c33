from __future__ import annotations


class PreconditionError(RuntimeError):
    """A call was made in a state that can never succeed; not transient."""

    exit_code: int = 2


class KeyStoreClosedError(PreconditionError):
    def __init__(self, message: str = "no open keystore") -> None:
        super().__init__(message)


class SigningKeyMissingError(PreconditionError):
    def __init__(self, message: str = "signing key not found") -> None:
        super().__init__(message)


class TransactionSealedError(PreconditionError):
    pass
