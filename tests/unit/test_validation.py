import pytest

from swedbank_pi.validation import (
    InvalidRequestError,
    is_valid_rf_reference,
    require,
    validate_amount,
    validate_currency,
    validate_https_url,
    validate_locale,
    validate_remittance,
)


@pytest.mark.parametrize("amount", ["10", "10.5", "10.00", "0.01"])
def test_valid_amounts(amount):
    validate_amount(amount)


@pytest.mark.parametrize("amount", ["0", "0.00", "-1", "10.001", "1,00", "abc", ".5"])
def test_invalid_amounts(amount):
    with pytest.raises(InvalidRequestError, match="positive number"):
        validate_amount(amount)


def test_currency_and_locale():
    validate_currency("EUR")
    validate_locale("lv")
    with pytest.raises(InvalidRequestError):
        validate_currency("USD")
    with pytest.raises(InvalidRequestError, match="Supported: en, et, lv, lt, ru"):
        validate_locale("de")


def test_require_names_missing_field():
    with pytest.raises(InvalidRequestError, match="returnUrl"):
        require(amount="1.00", returnUrl="")


def test_https_url_rules():
    validate_https_url("https://shop.example.com/return?order=1", "Redirect URL")
    with pytest.raises(InvalidRequestError, match="HTTPS"):
        validate_https_url("http://shop.example.com/return", "Redirect URL")
    with pytest.raises(InvalidRequestError, match="valid URL"):
        validate_https_url("not a url", "Redirect URL")
    with pytest.raises(InvalidRequestError, match="maximum length of 2048"):
        validate_https_url("https://shop.example.com/" + "a" * 2048, "Notification URL")


@pytest.mark.parametrize("reference", ["RF18539007547034", "RF712348231", "rf18539007547034"])
def test_valid_rf_references(reference):
    assert is_valid_rf_reference(reference)


@pytest.mark.parametrize("reference", ["RF19539007547034", "RF1", "RF18-5390", "XX18539007547034"])
def test_invalid_rf_references(reference):
    assert not is_valid_rf_reference(reference)


def test_remittance_rules():
    validate_remittance("Order 42", None, "LV")
    validate_remittance(None, "1234561", "LT")
    validate_remittance("Order 42", "1234561", "EE")

    with pytest.raises(InvalidRequestError, match="either"):
        validate_remittance("Order 42", "1234561", "LV")
    with pytest.raises(InvalidRequestError, match="140"):
        validate_remittance("x" * 141, None, "LV")
    with pytest.raises(InvalidRequestError, match="25"):
        validate_remittance(None, "1" * 26, "LV")
    with pytest.raises(InvalidRequestError, match="ISO11649"):
        validate_remittance(None, "RF19539007547034", "LV")
