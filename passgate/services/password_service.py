"""Password hashing, verification, and random password generation.

Hashes are Argon2id (argon2-cffi) over an HMAC-SHA256 "pepper" of the
plaintext keyed by PWD_SECRET:

    stored = argon2(hmac_sha256(PWD_SECRET, password))

The Argon2 string already carries salt and parameters.  The pepper means a
leaked table of hashes is useless without the secret, which never touches
the database.

Failures are raised as PasswordServiceError subclasses (all 400) so the
steps can forward the message as-is.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import string

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from passgate.core.errors import InvalidPasswordError, PasswordPolicyError
from passgate.core.keys import decode_secret
from passgate.models.password_policy import PasswordPolicy

logger = logging.getLogger(__name__)

_ph = PasswordHasher()

_SIMILAR_CHARS = frozenset("il1Lo0O")
_SYMBOLS = "!@#%*()_+^&}{:;?."


def _require_password(value: object) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidPasswordError(
            "Invalid input - caused by: password must be a non-empty string"
        )
    return value


def _pepper(plain_password: str, secret: str) -> str:
    key = decode_secret(secret)
    return hmac.new(key, plain_password.encode("utf-8"), hashlib.sha256).hexdigest()


def encrypt(plain_password: str, secret: str) -> str:
    """Return an Argon2 hash of the peppered password.  Salted: two calls differ."""
    peppered = _pepper(_require_password(plain_password), secret)
    return _ph.hash(peppered)


def compare(plain_password: str, password_hash: str, secret: str) -> bool:
    """True if *plain_password* matches *password_hash*.

    A mismatch returns False.  A hash that is not an Argon2 string, or a bad
    secret, raises instead: those are caller bugs, not wrong passwords.
    """
    peppered = _pepper(_require_password(plain_password), secret)
    if not isinstance(password_hash, str) or not password_hash:
        raise InvalidPasswordError(
            "Invalid input - caused by: hash must be a non-empty string"
        )
    try:
        return _ph.verify(password_hash, peppered)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as e:
        raise InvalidPasswordError(f"Invalid input - caused by: {e}") from None


# ---------------------------------------------------------------------------
# Random passwords
# ---------------------------------------------------------------------------


def _pools(policy: PasswordPolicy) -> list[str]:
    pools = []
    if policy.lowercase:
        pools.append(string.ascii_lowercase)
    if policy.uppercase:
        pools.append(string.ascii_uppercase)
    if policy.numbers:
        pools.append(string.digits)
    if policy.symbols:
        pools.append(_SYMBOLS)
    if policy.exclude_similar_chars:
        pools = ["".join(c for c in pool if c not in _SIMILAR_CHARS) for pool in pools]
    return pools


def random_password(policy: PasswordPolicy) -> str:
    """Generate a password of policy.length characters from secrets.SystemRandom.

    With strict, one character from each enabled class is placed first and
    the result is shuffled, so every class is guaranteed to appear.
    """
    pools = _pools(policy)
    if not pools:
        raise PasswordPolicyError("Invalid password policy: no character class enabled")
    if not isinstance(policy.length, int) or policy.length < 1:
        raise PasswordPolicyError(
            "Invalid password policy: length must be a positive integer "
            f"(got {policy.length!r})"
        )
    if policy.strict and policy.length < len(pools):
        raise PasswordPolicyError(
            f"Invalid password policy: strict mode needs length >= {len(pools)}"
        )

    rng = secrets.SystemRandom()
    alphabet = "".join(pools)
    chars = [rng.choice(pool) for pool in pools] if policy.strict else []
    chars += [rng.choice(alphabet) for _ in range(policy.length - len(chars))]
    rng.shuffle(chars)
    return "".join(chars)
