"""Password policy and bcrypt hashing."""

from engage.infrastructure.security.password import PasswordHasher
from engage.infrastructure.security.password_policy import DEFAULT_PASSWORD_POLICY, PasswordPolicy


def test_strong_password_passes() -> None:
    assert DEFAULT_PASSWORD_POLICY.validate("Str0ng!Passw0rd") == []


def test_weak_password_lists_every_reason() -> None:
    errors = DEFAULT_PASSWORD_POLICY.validate("abc")
    assert len(errors) == 4
    assert any("at least 8" in e for e in errors)
    assert any("digit" in e for e in errors)
    assert any("uppercase" in e for e in errors)
    assert any("non-alphanumeric" in e for e in errors)


def test_relaxed_policy() -> None:
    policy = PasswordPolicy(min_length=4, require_non_alphanumeric=False, require_uppercase=False)
    assert policy.validate("abc1") == []


# Minimum bcrypt cost keeps these fast.
hasher = PasswordHasher(rounds=4)


async def test_hash_and_match() -> None:
    hashed = await hasher.hash("Str0ng!Passw0rd")
    assert hashed.startswith("$2b$04$")
    assert await hasher.matches("Str0ng!Passw0rd", hashed)
    assert not await hasher.matches("Wr0ng!Passw0rd", hashed)


def test_long_passwords_are_not_truncated() -> None:
    """Bytes past bcrypt's 72-byte input limit still count."""
    base = "A1!" + "x" * 80
    hashed = hasher.hash_sync(base + "a")
    assert not hasher.matches_sync(base + "b", hashed)


def test_malformed_stored_hash_never_matches() -> None:
    assert not hasher.matches_sync("anything", "not-a-bcrypt-hash")
    assert not hasher.matches_sync("anything", "")


async def test_burn_uses_a_decoy_once() -> None:
    local = PasswordHasher(rounds=4)
    await local.burn("guess-1")
    decoy = local._decoy
    await local.burn("guess-2")
    assert decoy is not None
    assert local._decoy == decoy
