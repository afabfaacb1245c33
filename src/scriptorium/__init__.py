__all__ = [
    # Errors
    "PreconditionError",
    "KeyStoreClosedError",
    "SigningKeyMissingError",
    "TransactionSealedError",
    "KeyStoreError",
    "KeyStoreAuthError",
    "KeyStoreFormatError",
    "CryptoError",
    "SignatureError",
    "RpcError",
    "SchemaValidationError",
    # Key store
    "KeyStore",
    "Argon2Params",
    # Keys and signing
    "generate_key",
    "get_address",
    "normalize_key",
    "recover_signer",
    "verify_transaction_signature",
    "DEFAULT_SIGNATURE_SCHEME",
    # Models
    "ChainStateSnapshot",
    "Transaction",
    "SignedTransaction",
    "Operation",
    "AccountCreate",
    "Transfer",
    "TransferToVest",
    "ConvertVest",
    "BpVote",
    "Follow",
    "Post",
    "Reply",
    "Vote",
    "Stake",
    "UnStake",
    "ContractApply",
    "operation_from_dict",
    # Node interaction
    "NodeRpc",
    "NodeClient",
    "RangePager",
    "TransactionPipeline",
    "MIN_TIMESTAMP",
    "MAX_TIMESTAMP",
    "Wallet",
]

from .errors import (
    KeyStoreClosedError,
    PreconditionError,
    SigningKeyMissingError,
    TransactionSealedError,
)
from .sigil.crypto import (
    DEFAULT_SIGNATURE_SCHEME,
    CryptoError,
    SignatureError,
    recover_signer,
    verify_transaction_signature,
)
from .sigil.keys import generate_key, get_address, normalize_key
from .sigil.keystore import KeyStore, KeyStoreAuthError, KeyStoreError, KeyStoreFormatError
from .sigil.vault import Argon2Params
from .spec.models import ChainStateSnapshot, SignedTransaction, Transaction
from .spec.operations import (
    AccountCreate,
    BpVote,
    ContractApply,
    ConvertVest,
    Follow,
    Operation,
    Post,
    Reply,
    Stake,
    Transfer,
    TransferToVest,
    UnStake,
    Vote,
    operation_from_dict,
)
from .spec.schemas import SchemaValidationError
from .pneuma.client import NodeClient
from .pneuma.pages import MAX_TIMESTAMP, MIN_TIMESTAMP, RangePager
from .pneuma.rpc import NodeRpc, RpcError
from .pneuma.tx import TransactionPipeline
from .wallet import Wallet
