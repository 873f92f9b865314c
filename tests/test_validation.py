import pytest

from storefront.application import validation
from storefront.domain.errors import ValidationError


def test_valid_registration_is_normalised():
    data = validation.validate_registration(" JoyPabs ", "JoyPabs@Gmail.com", "Joyp$123", "Joyp$123")
    assert data.username == "JoyPabs"
    assert data.email == "joypabs@gmail.com"
    assert data.password == "Joyp$123"


def test_registration_rejects_mismatched_passwords():
    with pytest.raises(ValidationError, match="do not match"):
        validation.validate_registration("JoyPabs", "joypabs@gmail.com", "Joyp$123", "Joyp$124")


@pytest.mark.parametrize("username", ["", "ab", "has space", "x" * 31, "semi;colon"])
def test_registration_rejects_bad_usernames(username):
    with pytest.raises(ValidationError):
        validation.validate_registration(username, "joypabs@gmail.com", "Joyp$123", "Joyp$123")


@pytest.mark.parametrize("email", [None, "", "not-an-email", "joy@"])
def test_rejects_bad_emails(email):
    with pytest.raises(ValidationError):
        validation.validate_email_address(email)


@pytest.mark.parametrize(
    "password",
    [
        None,
        "Jp$1",  # too short
        "joyp$123",  # no uppercase
        "JOYP$123",  # no lowercase
        "Joyp1234",  # no special character
        "Joyp$" + "a" * 70,  # longer than bcrypt accepts
    ],
)
def test_password_policy(password):
    with pytest.raises(ValidationError):
        validation.validate_password_strength(password)


def test_login_requires_both_fields():
    with pytest.raises(ValidationError):
        validation.validate_login("", "Joyp$123")
    with pytest.raises(ValidationError):
        validation.validate_login("JoyPabs", "")
    assert validation.validate_login(" JoyPabs", "x").username == "JoyPabs"


def test_password_change_requires_current_password():
    with pytest.raises(ValidationError):
        validation.validate_password_change("", "NewJoyp$123", "NewJoyp$123")
    data = validation.validate_password_change("Joyp$123", "NewJoyp$123", "NewJoyp$123")
    assert data.new_password == "NewJoyp$123"


def test_password_reset_rejects_mismatch():
    with pytest.raises(ValidationError):
        validation.validate_password_reset("NewJoyp$123", "NewJoyp$124")


def test_product_validation():
    data = validation.validate_product(" Smartphone ", None, 750)
    assert data.name == "Smartphone"
    assert data.description == ""

    with pytest.raises(ValidationError):
        validation.validate_product(None, "", 10)
    with pytest.raises(ValidationError):
        validation.validate_product("Phone", "", -1)
    with pytest.raises(ValidationError):
        validation.validate_product("   ", "", 1)

    partial = validation.validate_product(None, None, 900, partial=True)
    assert partial.name is None
    assert partial.description is None
    assert partial.price == 900


@pytest.mark.parametrize("price", [float("nan"), float("inf"), float("-inf")])
def test_product_price_must_be_finite(price):
    with pytest.raises(ValidationError, match="finite"):
        validation.validate_product("Phone", "", price)
    with pytest.raises(ValidationError, match="finite"):
        validation.validate_product(None, None, price, partial=True)
