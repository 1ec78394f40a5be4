"""Authentication service backed by the session, account and verification tables."""

from datetime import datetime, timedelta

import structlog
from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from doutor_agenda.config import settings
from doutor_agenda.core.exceptions import ConflictException, UnauthorizedException
from doutor_agenda.core.security import (
    as_utc,
    create_verification_token,
    decode_verification_token,
    generate_session_token,
    get_password_hash,
    utcnow,
    verify_password,
)
from doutor_agenda.models.auth import accounts, sessions, verifications
from doutor_agenda.services.user_service import UserService

logger = structlog.get_logger()

CREDENTIAL_PROVIDER = "credential"
INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """
    Email/password authentication with database sessions.

    Every sign-in creates a row in ``session`` whose opaque token is handed to
    the client. Passwords live hashed on the user's ``credential`` account.
    Email verification tokens are signed JWTs, also recorded in
    ``verification`` so that each can be consumed only once.
    """

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.users = UserService()

    # ------------------------------------------------------------------
    # Sign up / sign in
    # ------------------------------------------------------------------

    async def sign_up_email(
        self,
        name: str,
        email: str,
        password: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[dict, dict, str]:
        """
        Register a user with a password and open a session.

        Returns:
            Tuple of (user, session, verification token)

        Raises:
            ConflictException: If the email is already registered
        """
        if await self.users.get_user_by_email(self.db, email):
            raise ConflictException("User with this email already exists")

        user = await self.users.create_user(self.db, name=name, email=email, commit=False)

        await self.db.execute(
            insert(accounts).values(
                account_id=user["id"],
                provider_id=CREDENTIAL_PROVIDER,
                user_id=user["id"],
                password=get_password_hash(password),
            )
        )
        session = await self._create_session(user["id"], ip_address, user_agent)
        token, _ = await self._store_verification(user["email"])

        await self.db.commit()

        logger.info("user_signed_up", user_id=user["id"])
        return user, session, token

    async def sign_in_email(
        self,
        email: str,
        password: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[dict, dict]:
        """
        Check a user's password and open a session.

        Raises:
            UnauthorizedException: If the email is unknown or the password is wrong
        """
        user = await self.users.get_user_by_email(self.db, email)
        if not user:
            raise UnauthorizedException(INVALID_CREDENTIALS)

        account = await self._get_credential_account(user["id"])
        if not account or not account["password"]:
            raise UnauthorizedException(INVALID_CREDENTIALS)

        if not verify_password(password, account["password"]):
            logger.info("sign_in_failed", user_id=user["id"])
            raise UnauthorizedException(INVALID_CREDENTIALS)

        session = await self._create_session(user["id"], ip_address, user_agent)
        await self.db.commit()

        logger.info("user_signed_in", user_id=user["id"])
        return user, session

    async def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Replace the password on the user's credential account.

        Raises:
            UnauthorizedException: If the current password does not match
        """
        account = await self._get_credential_account(user_id)
        if not account or not account["password"]:
            raise UnauthorizedException("Account has no password")

        if not verify_password(current_password, account["password"]):
            raise UnauthorizedException("Current password is incorrect")

        await self.db.execute(
            update(accounts)
            .where(accounts.c.id == account["id"])
            .values(password=get_password_hash(new_password))
        )
        await self.db.commit()

        logger.info("password_changed", user_id=user_id)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def get_session(self, token: str) -> tuple[dict, dict]:
        """
        Resolve a session token to its session and user.

        Sessions nearing their end are pushed forward once their last
        refresh is older than the configured update age.

        Raises:
            UnauthorizedException: If the token is unknown or expired
        """
        result = await self.db.execute(select(sessions).where(sessions.c.token == token))
        session = result.mappings().first()

        if not session:
            raise UnauthorizedException("Invalid session")

        session = dict(session)
        now = utcnow()

        if as_utc(session["expires_at"]) <= now:
            await self.db.execute(delete(sessions).where(sessions.c.id == session["id"]))
            await self.db.commit()
            logger.info("session_expired", session_id=session["id"])
            raise UnauthorizedException("Session expired")

        user = await self.users.get_user_by_id(self.db, session["user_id"])
        if not user:
            raise UnauthorizedException("Invalid session")

        if self._needs_refresh(session["expires_at"], now):
            result = await self.db.execute(
                update(sessions)
                .where(sessions.c.id == session["id"])
                .values(expires_at=now + timedelta(seconds=settings.session_expires_in_seconds))
                .returning(sessions)
            )
            session = dict(result.mappings().one())
            await self.db.commit()

        return session, user

    async def sign_out(self, token: str) -> None:
        """Delete the session behind a token. Unknown tokens are ignored."""
        await self.db.execute(delete(sessions).where(sessions.c.token == token))
        await self.db.commit()

    async def list_sessions(self, user_id: str) -> list[dict]:
        """List a user's unexpired sessions, newest first."""
        query = (
            select(sessions)
            .where(and_(sessions.c.user_id == user_id, sessions.c.expires_at > utcnow()))
            .order_by(sessions.c.created_at.desc())
        )
        result = await self.db.execute(query)
        return [dict(s) for s in result.mappings().all()]

    async def revoke_other_sessions(self, user_id: str, keep_token: str) -> int:
        """Delete every session of a user except the one behind ``keep_token``."""
        result = await self.db.execute(
            delete(sessions).where(
                and_(sessions.c.user_id == user_id, sessions.c.token != keep_token)
            )
        )
        await self.db.commit()
        return result.rowcount  # type: ignore[attr-defined]

    # ------------------------------------------------------------------
    # Email verification
    # ------------------------------------------------------------------

    async def create_email_verification(self, user: dict) -> tuple[str, datetime]:
        """
        Issue a verification token for a signed-in user's own address.

        Raises:
            ConflictException: If the address is already verified
        """
        if user["email_verified"]:
            raise ConflictException("Email is already verified")

        token, expires_at = await self._store_verification(user["email"])
        await self.db.commit()
        return token, expires_at

    async def verify_email(self, token: str) -> dict:
        """
        Consume a verification token and mark its user verified.

        Raises:
            UnauthorizedException: If the token is malformed, expired or already used
        """
        payload = decode_verification_token(token)
        if payload is None:
            raise UnauthorizedException("Invalid or expired verification token")

        email = payload["email"]
        result = await self.db.execute(
            delete(verifications)
            .where(and_(verifications.c.identifier == email, verifications.c.value == token))
            .returning(verifications.c.id)
        )
        if result.first() is None:
            await self.db.rollback()
            raise UnauthorizedException("Invalid or expired verification token")

        user = await self.users.get_user_by_email(self.db, email)
        if not user:
            await self.db.rollback()
            raise UnauthorizedException("User not found")

        user = await self.users.mark_email_verified(self.db, user["id"], commit=False)
        await self.db.commit()

        logger.info("email_verified", user_id=user["id"])  # type: ignore[index]
        return user  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _create_session(
        self,
        user_id: str,
        ip_address: str | None,
        user_agent: str | None,
    ) -> dict:
        """Insert a new session row without committing."""
        query = (
            insert(sessions)
            .values(
                token=generate_session_token(),
                user_id=user_id,
                expires_at=utcnow() + timedelta(seconds=settings.session_expires_in_seconds),
                ip_address=ip_address,
                user_agent=user_agent,
            )
            .returning(sessions)
        )
        result = await self.db.execute(query)
        return dict(result.mappings().one())

    async def _store_verification(self, email: str) -> tuple[str, datetime]:
        """
        Sign a verification token and record it without committing.

        Expired tokens left behind for the same address are removed.
        """
        identifier = email.lower()
        now = utcnow()
        expires_delta = timedelta(minutes=settings.verification_token_expire_minutes)
        token = create_verification_token(identifier, expires_delta)
        expires_at = now + expires_delta

        await self.db.execute(
            delete(verifications).where(
                and_(verifications.c.identifier == identifier, verifications.c.expires_at <= now)
            )
        )
        await self.db.execute(
            insert(verifications).values(
                identifier=identifier,
                value=token,
                expires_at=expires_at,
            )
        )
        return token, expires_at

    async def _get_credential_account(self, user_id: str) -> dict | None:
        query = select(accounts).where(
            and_(accounts.c.user_id == user_id, accounts.c.provider_id == CREDENTIAL_PROVIDER)
        )
        result = await self.db.execute(query)
        account = result.mappings().first()
        return dict(account) if account else None

    @staticmethod
    def _needs_refresh(expires_at: datetime, now: datetime) -> bool:
        # A session was last refreshed at expires_at - expires_in
        last_refresh = as_utc(expires_at) - timedelta(seconds=settings.session_expires_in_seconds)
        return now - last_refresh >= timedelta(seconds=settings.session_update_age_seconds)
