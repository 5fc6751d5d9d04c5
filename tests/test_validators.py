import pytest

from app.validators import (
    has_errors,
    validate_city,
    validate_email,
    validate_fields,
    validate_name,
    validate_submission,
)


def test_empty_email_is_required():
    assert validate_email("") == "Email is required"
    assert validate_email(None) == "Email is required"


def test_email_without_dotted_domain_is_a_domain_error():
    assert validate_email("a@b") == "Invalid email domain format"


@pytest.mark.parametrize("email", ["plainaddress", "a b@c.com", "@example.com", "user@"])
def test_malformed_email_is_rejected(email):
    assert validate_email(email) == "Please enter a valid email address"


def test_double_dot_in_local_part_is_invalid_format():
    assert validate_email("a..b@c.com") == "Invalid email format"


@pytest.mark.parametrize("email", ["user@example..com", "user@.example.com"])
def test_bad_dots_in_domain(email):
    assert validate_email(email) == "Invalid email domain format"


def test_leading_dot_in_address_is_invalid_format():
    assert validate_email(".user@example.com") == "Invalid email format"


def test_valid_email_has_no_error():
    assert validate_email("user@example.com") == ""
    assert validate_email("first.last@mail.example.co.uk") == ""


def test_name_and_city_require_non_blank_values():
    assert validate_name("   ") == "Name is required"
    assert validate_name("Ada") == ""
    assert validate_city("") == "City is required"
    assert validate_city(" Paris ") == ""


def test_validate_submission_reports_every_field():
    errors = validate_submission("", "bad", "")

    assert errors == {
        "name": "Name is required",
        "email": "Please enter a valid email address",
        "city": "City is required",
    }
    assert has_errors(errors)


def test_validate_fields_checks_only_supplied_fields():
    errors = validate_fields(email="user@example.com")

    assert errors == {"email": ""}
    assert not has_errors(errors)


def test_validate_fields_rejects_unknown_field():
    with pytest.raises(ValueError):
        validate_fields(phone="123")
