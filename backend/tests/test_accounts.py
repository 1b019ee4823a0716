"""
Tests for user accounts and bearer tokens.
"""

from datetime import timedelta

import jwt
import pytest

from ainews.models.domain import Category
from ainews.services.accounts import (
    AccountService,
    InvalidCredentialsError,
    InvalidTokenError,
    UserExistsError,
    UserNotFoundError,
    hash_password,
    verify_password,
)

SECRET = "test-secret"


def make_accounts(database, **kwargs):
    return AccountService(database, SECRET, bcrypt_rounds=4, **kwargs)


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("hunter2", rounds=4)

        assert hashed != "hunter2"
        assert verify_password("hunter2", hashed)
        assert not verify_password("hunter3", hashed)

    def test_garbage_hash_does_not_verify(self):
        assert not verify_password("hunter2", "not-a-bcrypt-hash")


class TestRegistration:
    def test_register_with_defaults(self, run_with_db):
        async def scenario(database):
            return await make_accounts(database).register("Reader@Example.com ", "pw")

        profile, token = run_with_db(scenario)

        assert profile.email == "reader@example.com"
        assert profile.categories == [Category.GENERAL]
        assert profile.id > 0
        assert token

    def test_register_with_categories(self, run_with_db):
        async def scenario(database):
            return await make_accounts(database).register(
                "a@example.com", "pw", [Category.SPORTS, Category.SCIENCE]
            )

        profile, _ = run_with_db(scenario)
        assert profile.categories == [Category.SPORTS, Category.SCIENCE]

    def test_duplicate_email_rejected(self, run_with_db):
        async def scenario(database):
            accounts = make_accounts(database)
            await accounts.register("a@example.com", "pw")
            await accounts.register("A@EXAMPLE.COM", "other")

        with pytest.raises(UserExistsError):
            run_with_db(scenario)


class TestLogin:
    def test_login_success(self, run_with_db):
        async def scenario(database):
            accounts = make_accounts(database)
            registered, _ = await accounts.register("a@example.com", "pw", [Category.HEALTH])
            profile, token = await accounts.login("a@example.com", "pw")
            return registered, profile, accounts.verify_token(token)

        registered, profile, user_id = run_with_db(scenario)

        assert profile.id == registered.id == user_id
        assert profile.categories == [Category.HEALTH]

    def test_unknown_email(self, run_with_db):
        async def scenario(database):
            await make_accounts(database).login("ghost@example.com", "pw")

        with pytest.raises(UserNotFoundError):
            run_with_db(scenario)

    def test_wrong_password(self, run_with_db):
        async def scenario(database):
            accounts = make_accounts(database)
            await accounts.register("a@example.com", "pw")
            await accounts.login("a@example.com", "wrong")

        with pytest.raises(InvalidCredentialsError):
            run_with_db(scenario)


class TestTokens:
    def test_authenticate_resolves_user(self, run_with_db):
        async def scenario(database):
            accounts = make_accounts(database)
            registered, token = await accounts.register("a@example.com", "pw")
            return registered, await accounts.authenticate(token)

        registered, profile = run_with_db(scenario)
        assert profile == registered

    def test_token_signed_with_other_secret(self, run_with_db):
        async def scenario(database):
            _, token = await make_accounts(database).register("a@example.com", "pw")
            AccountService(database, "other-secret").verify_token(token)

        with pytest.raises(InvalidTokenError):
            run_with_db(scenario)

    def test_expired_token(self, run_with_db):
        async def scenario(database):
            accounts = make_accounts(database, token_ttl=timedelta(seconds=-10))
            _, token = await accounts.register("a@example.com", "pw")
            accounts.verify_token(token)

        with pytest.raises(InvalidTokenError):
            run_with_db(scenario)

    def test_malformed_token(self, run_with_db):
        async def scenario(database):
            make_accounts(database).verify_token("not.a.token")

        with pytest.raises(InvalidTokenError):
            run_with_db(scenario)

    def test_token_without_subject(self, run_with_db):
        token = jwt.encode({"email": "a@example.com"}, SECRET, algorithm="HS256")

        async def scenario(database):
            make_accounts(database).verify_token(token)

        with pytest.raises(InvalidTokenError):
            run_with_db(scenario)

    def test_token_for_deleted_user(self, run_with_db):
        token = jwt.encode({"sub": "999"}, SECRET, algorithm="HS256")

        async def scenario(database):
            await make_accounts(database).authenticate(token)

        with pytest.raises(UserNotFoundError):
            run_with_db(scenario)


class TestCategories:
    def test_update_categories(self, run_with_db):
        async def scenario(database):
            accounts = make_accounts(database)
            profile, _ = await accounts.register("a@example.com", "pw")
            updated = await accounts.update_categories(
                profile.id, [Category.SPORTS, Category.BUSINESS, Category.SPORTS]
            )
            return updated, await accounts.get_user(profile.id)

        updated, profile = run_with_db(scenario)

        assert updated == [Category.SPORTS, Category.BUSINESS]
        assert profile.categories == [Category.SPORTS, Category.BUSINESS]

    def test_update_unknown_user(self, run_with_db):
        async def scenario(database):
            await make_accounts(database).update_categories(42, [Category.SPORTS])

        with pytest.raises(UserNotFoundError):
            run_with_db(scenario)
