"""
User accounts: registration, login, bearer tokens and category preferences.

Identity always comes from the bearer token of the current request; there
is no process-wide "current user".
"""
import asyncio
from datetime import timedelta
from typing import Iterable, Optional

import bcrypt
import jwt
import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ainews.config import Settings
from ainews.models.database import Database, DBUser
from ainews.models.domain import Category, UserProfile, utcnow

logger = structlog.get_logger(__name__)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


class AccountError(Exception):
    """Base class for account errors."""


class UserExistsError(AccountError):
    pass


class InvalidCredentialsError(AccountError):
    pass


class UserNotFoundError(AccountError):
    pass


class InvalidTokenError(AccountError):
    pass


def hash_password(password: str, rounds: int = 12) -> str:
    hashed = bcrypt.hashpw(password.encode()[:_BCRYPT_MAX_BYTES], bcrypt.gensalt(rounds=rounds))
    return hashed.decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode()[:_BCRYPT_MAX_BYTES], password_hash.encode())
    except ValueError:
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def to_profile(user: DBUser) -> UserProfile:
    return UserProfile(
        id=user.id,
        email=user.email,
        categories=[Category(c) for c in user.categories_json or []],
        created_at=user.created_at,
    )


class AccountService:
    """Account operations backed by the users table."""

    def __init__(
        self,
        database: Database,
        secret: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(hours=24),
        bcrypt_rounds: int = 12,
        default_categories: Iterable[Category] = (Category.GENERAL,),
    ):
        self.database = database
        self.secret = secret
        self.algorithm = algorithm
        self.token_ttl = token_ttl
        self.bcrypt_rounds = bcrypt_rounds
        self.default_categories = list(default_categories)

    @classmethod
    def from_settings(cls, settings: Settings, database: Database) -> "AccountService":
        return cls(
            database,
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            token_ttl=timedelta(hours=settings.token_expire_hours),
            bcrypt_rounds=settings.bcrypt_rounds,
            default_categories=settings.default_categories,
        )

    # -- tokens ---------------------------------------------------------------

    def issue_token(self, user: UserProfile) -> str:
        now = utcnow()
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "iat": now,
            "exp": now + self.token_ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> int:
        """Return the user id carried by a valid token."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return int(payload["sub"])
        except (jwt.PyJWTError, KeyError, ValueError) as e:
            raise InvalidTokenError(str(e)) from e

    # -- accounts -------------------------------------------------------------

    async def register(
        self,
        email: str,
        password: str,
        categories: Optional[Iterable[Category]] = None,
    ) -> tuple[UserProfile, str]:
        email = normalize_email(email)
        chosen = list(categories) if categories else self.default_categories
        password_hash = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)

        async with self.database.async_session() as session:
            result = await session.execute(select(DBUser).where(DBUser.email == email))
            if result.scalar_one_or_none():
                raise UserExistsError(email)

            user = DBUser(
                email=email,
                password_hash=password_hash,
                categories_json=[c.value for c in chosen],
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as e:
                raise UserExistsError(email) from e
            await session.refresh(user)
            profile = to_profile(user)

        logger.info("User registered", user_id=profile.id)
        return profile, self.issue_token(profile)

    async def login(self, email: str, password: str) -> tuple[UserProfile, str]:
        email = normalize_email(email)

        async with self.database.async_session() as session:
            result = await session.execute(select(DBUser).where(DBUser.email == email))
            user = result.scalar_one_or_none()

        if not user:
            raise UserNotFoundError(email)

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            raise InvalidCredentialsError(email)

        profile = to_profile(user)
        logger.info("User logged in", user_id=profile.id)
        return profile, self.issue_token(profile)

    async def get_user(self, user_id: int) -> UserProfile:
        async with self.database.async_session() as session:
            user = await session.get(DBUser, user_id)
            if not user:
                raise UserNotFoundError(str(user_id))
            return to_profile(user)

    async def authenticate(self, token: str) -> UserProfile:
        """Resolve a bearer token to its user."""
        return await self.get_user(self.verify_token(token))

    async def update_categories(self, user_id: int, categories: Iterable[Category]) -> list[Category]:
        async with self.database.async_session() as session:
            user = await session.get(DBUser, user_id)
            if not user:
                raise UserNotFoundError(str(user_id))

            # Keep order, drop repeats
            unique = list(dict.fromkeys(categories))
            user.categories_json = [c.value for c in unique]
            await session.commit()

        logger.info("Updated user categories", user_id=user_id, categories=[c.value for c in unique])
        return unique
