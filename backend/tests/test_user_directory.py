"""Tests for user registration and lookup."""

import uuid

import pytest

from teamhub.core.exceptions import ConflictError, ValidationError
from teamhub.services import user_directory


class TestRegisterUser:

    def test_register_normalizes_and_hashes(self, db):
        user = user_directory.register_user(db, username="  Dana ", email="Dana@Example.COM", password="secret1")

        assert user.username == "dana"
        assert user.email == "dana@example.com"
        assert user.password_hash != "secret1"
        assert user_directory.verify_password(user, "secret1") is True
        assert user_directory.verify_password(user, "wrong-password") is False

    def test_duplicate_email_conflicts(self, db):
        user_directory.register_user(db, username="dana", email="dana@example.com", password="secret1")
        with pytest.raises(ConflictError):
            user_directory.register_user(db, username="other", email="DANA@example.com", password="secret1")

    def test_duplicate_username_conflicts(self, db):
        user_directory.register_user(db, username="dana", email="dana@example.com", password="secret1")
        with pytest.raises(ConflictError):
            user_directory.register_user(db, username="Dana", email="dana2@example.com", password="secret1")

    @pytest.mark.parametrize("username,password", [
        ("", "secret1"),
        ("x" * 26, "secret1"),
        ("dana", "short"),
        ("dana", "p" * 51),
    ])
    def test_invalid_input(self, db, username, password):
        with pytest.raises(ValidationError):
            user_directory.register_user(db, username=username, email="dana@example.com", password=password)


class TestLookup:

    def test_find_by_email_is_case_insensitive(self, db, alice):
        assert user_directory.find_by_email(db, " ALICE@example.com ").id == alice.id

    def test_find_by_email_missing(self, db):
        assert user_directory.find_by_email(db, "nobody@example.com") is None
        assert user_directory.find_by_email(db, "") is None

    def test_find_by_id(self, db, alice):
        assert user_directory.find_by_id(db, alice.id).username == "alice"
        assert user_directory.find_by_id(db, uuid.uuid4()) is None
