from storefront.services.password_hasher import PasswordHasher


def test_hash_never_contains_plaintext(hasher):
    password_hash = hasher.hash("Joyp$123")
    assert "Joyp$123" not in password_hash
    assert password_hash.startswith("$2")


def test_verify_matches_only_the_original_password(hasher):
    password_hash = hasher.hash("Joyp$123")
    assert hasher.verify("Joyp$123", password_hash) is True
    assert hasher.verify("joyp$123", password_hash) is False
    assert hasher.verify("", password_hash) is False


def test_hashes_are_salted(hasher):
    assert hasher.hash("Joyp$123") != hasher.hash("Joyp$123")


def test_malformed_hash_does_not_verify():
    assert PasswordHasher(rounds=4).verify("Joyp$123", "not-a-bcrypt-hash") is False
