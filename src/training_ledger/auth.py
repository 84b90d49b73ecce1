"""Credential gate in front of the CLI.

Keeps casual onlookers out of a personal tool. It is not a security
boundary: the expected credentials live in plain configuration.
"""

from training_ledger.config import AuthConfig
from training_ledger.storage import codec
from training_ledger.storage.blob_store import AUTH_KEY, BlobStore
from training_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


class CredentialGate:
    """Checks credentials and remembers a successful login in the store."""

    def __init__(self, auth_config: AuthConfig, store: BlobStore):
        self.auth_config = auth_config
        self.store = store

    @property
    def enabled(self) -> bool:
        return self.auth_config.enabled

    def check(self, username: str, password: str) -> bool:
        """Compare credentials: username case-insensitively, password exactly."""
        return (
            username.strip().lower() == self.auth_config.username.strip().lower()
            and password == self.auth_config.password
        )

    def login(self, username: str, password: str) -> bool:
        """Validate credentials and persist the authenticated flag on success."""
        if not self.check(username, password):
            logger.warning("Login rejected")
            return False
        self.store.put(AUTH_KEY, codec.encode_auth_flag(True))
        logger.info("Login accepted")
        return True

    def logout(self) -> None:
        self.store.put(AUTH_KEY, codec.encode_auth_flag(False))
        logger.info("Logged out")

    @property
    def is_authenticated(self) -> bool:
        """True when the gate is disabled or a login flag is stored.

        An unreadable flag counts as logged out.
        """
        if not self.enabled:
            return True
        result = codec.decode_auth_flag(self.store.get(AUTH_KEY))
        if not result.ok:
            if result.errors:
                logger.warning(f"Ignoring unreadable auth flag: {'; '.join(result.errors)}")
            return False
        return bool(result.value)
