"""Set of optional server features that are currently active.

Sent from server to client during connect, as one field of the version
message. Servers and clients older than VERSION_FOR_SERVERFEATURES
(1.1.19) don't send the list; they assume the two features which were
always active back then. Use ``ServerFeatures(with_old_defaults=True)``,
or :meth:`ServerFeatures.from_peer`, when talking to such a peer.

Feature names are kept simple (lowercase alphanumerics, underscore, dash)
for encoding into network message fields. The encoded list starts and ends
with SEP_CHAR, so ``";users;"`` in the list means "users" is active.

Not thread-safe: built once per connection, then only read.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .errors import InvalidArgumentError, MalformedEncodingError

if TYPE_CHECKING:
    from .config import ServerConfig

logger = logging.getLogger(__name__)

# Minimum version (1.1.19) of client/server which send and recognize server features
VERSION_FOR_SERVERFEATURES = 1119

# Users defined in a persistent database; nicknames and passwords are authenticated
FEAT_USERS = "users"

# Users are allowed to create chat channels
FEAT_CHANNELS = "ch"

# Separator between features in the encoded list
SEP_CHAR = ";"


def _check_name(feature_name: Optional[str]) -> None:
    if not feature_name:
        raise InvalidArgumentError(f"featureName: {feature_name!r}", argument="feature_name")


class ServerFeatures:
    """Active server features, as names in the order they were added.

    Adding a name twice keeps both copies: the encoded list is then longer
    than it needs to be, but is_active is still correct.
    """

    def __init__(self, with_old_defaults: bool = False):
        """Create with nothing active, or with the pre-1.1.19 defaults.

        Args:
            with_old_defaults: Activate FEAT_CHANNELS and FEAT_USERS,
                which were assumed always active in servers older than 1.1.19
        """
        self._features: List[str] = [FEAT_CHANNELS, FEAT_USERS] if with_old_defaults else []
        self._encoded: Optional[str] = None

    @classmethod
    def from_encoded(cls, encoded_list: Optional[str]) -> ServerFeatures:
        """Decode a list from :meth:`encoded_list`; useful at client.

        Args:
            encoded_list: Encoded list, or None or "" for none

        Raises:
            MalformedEncodingError: if encoded_list isn't empty but doesn't
                start and end with SEP_CHAR
        """
        features = cls()
        if not encoded_list:
            return features

        if encoded_list[0] != SEP_CHAR or encoded_list[-1] != SEP_CHAR:
            logger.debug("Bad server features encoding: %r", encoded_list)
            raise MalformedEncodingError(
                f"Bad encoding: {encoded_list}", encoded=encoded_list
            )

        features._features = [name for name in encoded_list[1:-1].split(SEP_CHAR) if name]
        return features

    @classmethod
    def from_peer(cls, peer_version: int, encoded_list: Optional[str]) -> ServerFeatures:
        """Features of a peer, given its version and the list it sent (if any)."""
        if peer_version < VERSION_FOR_SERVERFEATURES:
            return cls(with_old_defaults=True)
        return cls.from_encoded(encoded_list)

    @property
    def features(self) -> Tuple[str, ...]:
        """Active feature names in the order added, including duplicates."""
        return tuple(self._features)

    def is_active(self, feature_name: str) -> bool:
        """Is this feature active?

        Raises:
            InvalidArgumentError: if feature_name is None or ""
        """
        _check_name(feature_name)
        encoded = self.encoded_list()
        if encoded is None:
            return False
        return f"{SEP_CHAR}{feature_name}{SEP_CHAR}" in encoded

    def add(self, feature_name: str) -> None:
        """Add this active feature.

        Raises:
            InvalidArgumentError: if feature_name is None or ""
        """
        _check_name(feature_name)
        self._features.append(feature_name)
        self._encoded = None

    def encoded_list(self) -> Optional[str]:
        """Encoded list of all active features to send to a client, or None if none."""
        if not self._features:
            return None
        if self._encoded is None:
            self._encoded = SEP_CHAR + SEP_CHAR.join(self._features) + SEP_CHAR
        return self._encoded

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServerFeatures):
            return NotImplemented
        return set(self._features) == set(other._features)

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(set(self._features))

    def __str__(self) -> str:
        encoded = self.encoded_list()
        return f"{type(self).__name__}{{{encoded if encoded is not None else '(empty)'}}}"

    __repr__ = __str__


def active_server_features(config: ServerConfig, extra: Iterable[str] = ()) -> ServerFeatures:
    """Features this server advertises, from its configuration."""
    features = ServerFeatures()
    if config.channels_enabled:
        features.add(FEAT_CHANNELS)
    if config.accounts_enabled:
        features.add(FEAT_USERS)
    for name in extra:
        features.add(name)

    logger.info("Active server features: %s", features)
    return features
