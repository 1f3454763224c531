import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from utils import validation  # noqa: E402


def registration_form(**overrides):
    form = {
        "first_name": "Ana",
        "last_name": "Bravo",
        "email": "ana@example.com",
        "phone": "+57 300 123 45",
        "password": "Pass1234",
        "confirm_password": "Pass1234",
        "accept_terms": True,
    }
    form.update(overrides)
    return form


def always_available(_email):
    return True


class RegistrationTestCase(unittest.TestCase):
    def test_valid_form(self):
        self.assertEqual(
            validation.validate_registration(registration_form(), always_available), {}
        )

    def test_empty_form_reports_every_field(self):
        errors = validation.validate_registration({}, always_available)
        self.assertEqual(
            set(errors),
            {
                "first_name",
                "last_name",
                "email",
                "phone",
                "password",
                "confirm_password",
                "accept_terms",
            },
        )

    def test_short_names(self):
        errors = validation.validate_registration(
            registration_form(first_name="A", last_name=" B "), always_available
        )
        self.assertIn("first_name", errors)
        self.assertIn("last_name", errors)

    def test_email_checks(self):
        errors = validation.validate_registration(
            registration_form(email="not-an-email"), always_available
        )
        self.assertEqual(errors["email"], "Email is not valid")

        errors = validation.validate_registration(
            registration_form(), lambda email: email != "ana@example.com"
        )
        self.assertEqual(errors["email"], "This email is already registered")

    def test_phone_length(self):
        for phone in ("1234567", "1234567890123456", "300-abc-1234"):
            errors = validation.validate_registration(
                registration_form(phone=phone), always_available
            )
            self.assertIn("phone", errors, phone)
        errors = validation.validate_registration(
            registration_form(phone="(300) 1234"), always_available
        )
        self.assertNotIn("phone", errors)

    def test_password_strength_and_confirmation(self):
        for pwd in ("Ab1", "alllowercase1", "ALLUPPER1", "NoDigitsHere"):
            errors = validation.validate_registration(
                registration_form(password=pwd, confirm_password=pwd), always_available
            )
            self.assertIn("password", errors, pwd)

        errors = validation.validate_registration(
            registration_form(confirm_password="Pass12345"), always_available
        )
        self.assertEqual(errors, {"confirm_password": "Passwords do not match"})

    def test_terms_must_be_accepted(self):
        errors = validation.validate_registration(
            registration_form(accept_terms=False), always_available
        )
        self.assertEqual(list(errors), ["accept_terms"])


class OtherFormsTestCase(unittest.TestCase):
    def test_profile(self):
        good = {
            "first_name": "Ana",
            "last_name": "Bravo",
            "email": "ana@example.com",
            "phone": "",
            "postal_code": "",
        }
        self.assertEqual(validation.validate_profile(good), {})

        errors = validation.validate_profile(
            {**good, "email": "ana@", "phone": "call me", "postal_code": "1234"}
        )
        self.assertEqual(set(errors), {"email", "phone", "postal_code"})

    def test_contact(self):
        self.assertEqual(
            validation.validate_contact(
                {"name": "Ana", "email": "ana@example.com", "message": "Hola"}
            ),
            {},
        )
        errors = validation.validate_contact(
            {"name": "  ", "email": "ana at example.com", "message": "\n"}
        )
        self.assertEqual(set(errors), {"name", "email", "message"})

    def test_password_change(self):
        self.assertEqual(
            validation.validate_password_change("Old12345", "New12345", "New12345"), {}
        )
        errors = validation.validate_password_change("Old12345", "Old12345", "Old12345")
        self.assertIn("new", errors)

        errors = validation.validate_password_change("", "weak", "other")
        self.assertEqual(set(errors), {"current", "new", "confirm"})


if __name__ == "__main__":
    unittest.main()
