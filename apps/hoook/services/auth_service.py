"""
Authentication service: email/password, phone one-time codes and federated
sign-in against an in-memory account store.

Errors are raised as AuthError and also kept on ``error_message`` so a client
can show the last failure; any success clears it.
"""

import hmac
import logging
import re
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

import bcrypt

from hoook.utils.datetime_utils import Clock, utcnow
from hoook.utils.exceptions import AuthError

logger = logging.getLogger(__name__)

# Verification code expiration (in minutes)
VERIFICATION_CODE_EXPIRATION_MINUTES = 10
VERIFICATION_CODE_LENGTH = 6
MIN_PASSWORD_LENGTH = 6
# bcrypt only reads the first 72 bytes and newer releases reject longer input
MAX_PASSWORD_BYTES = 72
SUPPORTED_FEDERATED_PROVIDERS = ("google", "apple")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CODE_PATTERN = re.compile(rf"[0-9]{{{VERIFICATION_CODE_LENGTH}}}")


@dataclass
class Account:
    """Authenticated-user handle."""

    provider: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    display_name: Optional[str] = None
    password_hash: Optional[str] = None
    federated_subject: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass
class PendingVerification:
    phone_number: str
    code: str
    expires_at: datetime


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def normalize_phone_number(raw: str) -> str:
    """
    Normalize user input into an E.164-like string.

    Keeps digits and a leading plus sign; adds the plus if it is missing.
    Input with no digits is returned trimmed so validation can reject it.
    """
    trimmed = raw.strip()
    filtered = "".join(ch for ch in trimmed if ch in "+0123456789")
    if not filtered:
        return trimmed
    if filtered.startswith("+"):
        return "+" + filtered[1:].replace("+", "")
    return "+" + filtered.replace("+", "")


def generate_verification_code() -> str:
    return "".join(secrets.choice("0123456789") for _ in range(VERIFICATION_CODE_LENGTH))


CodeSender = Callable[[str, str], None]


def _log_code_sender(phone_number: str, code: str) -> None:
    logger.info(f"Verification code for {phone_number} generated (delivery not configured)")


class AuthService:
    """In-memory identity provider."""

    def __init__(self, code_sender: CodeSender = _log_code_sender, clock: Clock = utcnow):
        self.code_sender = code_sender
        self.clock = clock
        self.current_account: Optional[Account] = None
        self.error_message: Optional[str] = None
        self._accounts_by_email: Dict[str, Account] = {}
        self._accounts_by_phone: Dict[str, Account] = {}
        self._accounts_by_subject: Dict[str, Account] = {}
        self._pending: Dict[str, PendingVerification] = {}

    def _fail(self, message: str) -> AuthError:
        logger.warning(f"Auth error: {message}")
        self.error_message = message
        return AuthError(message)

    def _succeed(self, account: Account) -> Account:
        self.current_account = account
        self.error_message = None
        return account

    def _purge_expired_codes(self) -> None:
        now = self.clock()
        expired = [key for key, pending in self._pending.items() if now > pending.expires_at]
        for key in expired:
            del self._pending[key]
        if expired:
            logger.debug(f"Dropped {len(expired)} expired verification codes")

    # Email auth

    def sign_up(self, email: str, password: str, first_name: str, last_name: str) -> Account:
        """
        Create an email/password account and sign it in.

        Raises:
            AuthError: If the email is invalid or taken, or the password is too short or too long
        """
        normalized = email.strip().lower()
        if not EMAIL_PATTERN.match(normalized):
            raise self._fail("The email address is badly formatted.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise self._fail(f"The password must be {MIN_PASSWORD_LENGTH} characters long or more.")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise self._fail(f"The password must be {MAX_PASSWORD_BYTES} bytes long or less.")
        if normalized in self._accounts_by_email:
            raise self._fail("The email address is already in use by another account.")

        account = Account(
            provider="password",
            email=normalized,
            display_name=f"{first_name.strip()} {last_name.strip()}",
            password_hash=hash_password(password),
        )
        self._accounts_by_email[normalized] = account
        logger.info(f"Created account {account.id}")
        return self._succeed(account)

    def sign_in(self, email: str, password: str) -> Account:
        """
        Sign in with email and password.

        Raises:
            AuthError: On unknown email or wrong password (same message for both)
        """
        account = self._accounts_by_email.get(email.strip().lower())
        if account is None or not account.password_hash or not verify_password(password, account.password_hash):
            raise self._fail("The email or password is incorrect.")
        return self._succeed(account)

    # Phone auth

    def send_verification_code(self, phone_number: str) -> str:
        """
        Send a one-time code to a phone number.

        Returns:
            Verification id to pass to verify_code
        """
        cleaned = normalize_phone_number(phone_number)
        if not re.fullmatch(r"\+\d{8,15}", cleaned):
            raise self._fail("The phone number is invalid.")

        self._purge_expired_codes()
        code = generate_verification_code()
        verification_id = secrets.token_urlsafe(16)
        self._pending[verification_id] = PendingVerification(
            phone_number=cleaned,
            code=code,
            expires_at=self.clock() + timedelta(minutes=VERIFICATION_CODE_EXPIRATION_MINUTES),
        )
        self.code_sender(cleaned, code)
        self.error_message = None
        return verification_id

    def verify_code(self, verification_id: str, code: str) -> Account:
        """
        Sign in with a phone one-time code, creating the account on first use.

        Raises:
            AuthError: If the verification id is unknown or already used, the code
                has expired, or the code is wrong
        """
        pending = self._pending.get(verification_id)
        if pending is None:
            raise self._fail("The verification ID is invalid.")
        if self.clock() > pending.expires_at:
            del self._pending[verification_id]
            raise self._fail("The SMS code has expired. Please re-send the verification code.")
        submitted = code.strip()
        if not CODE_PATTERN.fullmatch(submitted) or not hmac.compare_digest(
            pending.code.encode("ascii"), submitted.encode("ascii")
        ):
            raise self._fail("The verification code is invalid.")

        del self._pending[verification_id]
        account = self._accounts_by_phone.get(pending.phone_number)
        if account is None:
            account = Account(provider="phone", phone_number=pending.phone_number)
            self._accounts_by_phone[pending.phone_number] = account
            logger.info(f"Created phone account {account.id}")
        return self._succeed(account)

    # Federated auth

    def sign_in_federated(
        self,
        provider: str,
        id_token: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Account:
        """
        Sign in with a token already issued by a federated provider.

        Token verification belongs to the provider SDK on the client; the token
        is used here as the provider's stable subject for the account.
        """
        provider = provider.lower()
        if provider not in SUPPORTED_FEDERATED_PROVIDERS:
            raise self._fail(f"Sign-in provider '{provider}' is not supported.")
        if not id_token:
            raise self._fail("Missing ID token")

        subject = f"{provider}:{id_token}"
        account = self._accounts_by_subject.get(subject)
        if account is None:
            account = Account(
                provider=provider,
                email=email.strip().lower() if email else None,
                display_name=display_name,
                federated_subject=subject,
            )
            self._accounts_by_subject[subject] = account
        return self._succeed(account)

    def sign_out(self) -> None:
        self.current_account = None
        self.error_message = None
