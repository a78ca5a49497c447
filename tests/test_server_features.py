"""Tests for ServerFeatures encoding, decoding and membership checks."""

import pytest

from settlers.config import ServerConfig
from settlers.errors import InvalidArgumentError, MalformedEncodingError
from settlers.server_features import (
    FEAT_CHANNELS,
    FEAT_USERS,
    VERSION_FOR_SERVERFEATURES,
    ServerFeatures,
    active_server_features,
)


class TestConstruction:
    """Tests for the default and legacy-default constructors."""

    def test_old_defaults(self):
        features = ServerFeatures(with_old_defaults=True)
        assert features.is_active(FEAT_USERS)
        assert features.is_active(FEAT_CHANNELS)
        assert features.encoded_list() == ";ch;users;"

    def test_empty(self):
        features = ServerFeatures()
        assert not features.is_active(FEAT_USERS)
        assert features.encoded_list() is None
        assert features.features == ()

    def test_str(self):
        assert str(ServerFeatures()) == "ServerFeatures{(empty)}"
        assert str(ServerFeatures(True)) == "ServerFeatures{;ch;users;}"


class TestDecode:
    """Tests for ServerFeatures.from_encoded."""

    @pytest.mark.parametrize("encoded", [None, ""])
    def test_empty_input(self, encoded):
        features = ServerFeatures.from_encoded(encoded)
        assert features.encoded_list() is None
        assert not features.is_active(FEAT_USERS)

    @pytest.mark.parametrize("encoded", ["users", ";users", "users;", "ch;users", "x"])
    def test_missing_separator(self, encoded):
        with pytest.raises(MalformedEncodingError) as exc_info:
            ServerFeatures.from_encoded(encoded)
        assert exc_info.value.encoded == encoded
        assert encoded in str(exc_info.value)

    def test_decoded_names(self):
        features = ServerFeatures.from_encoded(";ch;users;sea-board;")
        assert features.features == ("ch", "users", "sea-board")
        assert features.is_active("sea-board")
        assert not features.is_active("sea")

    def test_round_trip(self):
        features = ServerFeatures()
        for name in ("users", "custom_1", "ch"):
            features.add(name)
        decoded = ServerFeatures.from_encoded(features.encoded_list())
        assert decoded == features
        assert decoded.encoded_list() == features.encoded_list()

    def test_equality_ignores_order(self):
        assert ServerFeatures.from_encoded(";users;ch;") == ServerFeatures(with_old_defaults=True)
        assert ServerFeatures.from_encoded(";users;") != ServerFeatures(with_old_defaults=True)


class TestFromPeer:
    """Tests for version-aware decoding."""

    def test_old_peer_gets_defaults(self):
        features = ServerFeatures.from_peer(VERSION_FOR_SERVERFEATURES - 1, None)
        assert features == ServerFeatures(with_old_defaults=True)

    def test_new_peer_decodes(self):
        features = ServerFeatures.from_peer(VERSION_FOR_SERVERFEATURES, ";users;")
        assert features.is_active(FEAT_USERS)
        assert not features.is_active(FEAT_CHANNELS)

    def test_new_peer_without_list(self):
        features = ServerFeatures.from_peer(2300, None)
        assert not features.is_active(FEAT_CHANNELS)


class TestAddAndIsActive:
    """Tests for add and is_active."""

    def test_active_after_add(self):
        features = ServerFeatures()
        features.add("dev-cards")
        assert features.is_active("dev-cards")
        assert features.encoded_list() == ";dev-cards;"

    def test_add_appends(self):
        features = ServerFeatures(with_old_defaults=True)
        features.add("x")
        assert features.encoded_list() == ";ch;users;x;"

    def test_duplicate_add_is_kept(self):
        """Adding twice isn't deduplicated: encoding grows, is_active stays true."""
        features = ServerFeatures()
        features.add(FEAT_USERS)
        first_len = len(features.encoded_list())
        features.add(FEAT_USERS)

        assert features.is_active(FEAT_USERS)
        assert len(features.encoded_list()) > first_len
        assert features.encoded_list() == ";users;users;"
        assert features.features == ("users", "users")
        assert len(features) == 1

    def test_no_partial_match(self):
        features = ServerFeatures.from_encoded(";users;")
        assert not features.is_active("user")
        assert not features.is_active("sers")

    @pytest.mark.parametrize("name", [None, ""])
    def test_empty_name_is_active(self, name):
        with pytest.raises(InvalidArgumentError):
            ServerFeatures(with_old_defaults=True).is_active(name)

    @pytest.mark.parametrize("name", [None, ""])
    def test_empty_name_add(self, name):
        features = ServerFeatures()
        with pytest.raises(InvalidArgumentError):
            features.add(name)
        assert features.encoded_list() is None


class TestActiveServerFeatures:
    """Tests for building the advertised set from config."""

    def test_defaults(self):
        features = active_server_features(ServerConfig())
        assert features.is_active(FEAT_CHANNELS)
        assert not features.is_active(FEAT_USERS)

    def test_accounts_and_extra(self):
        config = ServerConfig(accounts_enabled=True, channels_enabled=False)
        features = active_server_features(config, extra=["sea"])
        assert features.encoded_list() == ";users;sea;"
