"""Tests for the owner variant and its column encoding."""

import pytest

from storefront.domain.owner import AnonymousOwner, UserOwner, owner_columns, owner_from_columns


class TestOwner:

    def test_user_columns(self):
        assert owner_columns(UserOwner(5)) == {"user_id": 5, "session_id": None}

    def test_anonymous_columns(self):
        assert owner_columns(AnonymousOwner("abc")) == {"user_id": None, "session_id": "abc"}

    def test_roundtrip_from_columns(self):
        assert owner_from_columns(5, None) == UserOwner(5)
        assert owner_from_columns(None, "abc") == AnonymousOwner("abc")

    @pytest.mark.parametrize("token", ["", "   "])
    def test_blank_token_rejected(self, token):
        with pytest.raises(ValueError):
            AnonymousOwner(token)

    def test_unknown_owner_type(self):
        with pytest.raises(TypeError):
            owner_columns("user-5")

    def test_labels(self):
        assert str(UserOwner(5)) == "user:5"
        assert str(AnonymousOwner("abc")) == "session:abc"
