# accounts/tests.py
from unittest import mock

from django.contrib.messages import get_messages
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from ecommerce.actions import ActionResponse

from .forms import ResetPasswordForm, UserRegistrationForm, VendorApplicationForm

REGISTRATION = {
    "firstName": "Bob", "lastName": "Buyer", "username": "bob_buyer", "email": "b@example.com",
    "mobile": "9800000000", "password": "Secret!1", "confirmPassword": "Secret!1", "termsAccepted": "on",
}


class BaseSetup(TestCase):
    def setUp(self):
        self.user = None
        patcher = mock.patch("ecommerce.middleware.cached_user", side_effect=lambda request: self.user)
        patcher.start()
        self.addCleanup(patcher.stop)

    def patch(self, target, **kwargs):
        patcher = mock.patch(f"ecommerce.actions.{target}", **kwargs)
        mocked = patcher.start()
        self.addCleanup(patcher.stop)
        return mocked


# ---------------- Forms ----------------

class RegistrationFormTests(SimpleTestCase):
    def test_payload_drops_confirmation_and_blanks(self):
        form = UserRegistrationForm(REGISTRATION)
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.payload()
        self.assertNotIn("confirmPassword", payload)
        self.assertNotIn("termsAccepted", payload)
        self.assertNotIn("city", payload)
        self.assertEqual(payload["username"], "bob_buyer")

    def test_password_rules(self):
        cases = [
            ("secret!1", "Password must contain at least one uppercase letter"),
            ("Secret11", "Password must contain at least one special character"),
            ("S!1", "Password must be at least 6 characters"),
        ]
        for password, message in cases:
            with self.subTest(password=password):
                form = UserRegistrationForm(dict(REGISTRATION, password=password, confirmPassword=password))
                self.assertIn(message, form.errors["password"])

    def test_passwords_must_match(self):
        form = UserRegistrationForm(dict(REGISTRATION, confirmPassword="Other!1"))
        self.assertEqual(form.errors["confirmPassword"], ["Passwords do not match"])

    def test_terms_must_be_accepted(self):
        data = dict(REGISTRATION)
        del data["termsAccepted"]
        form = UserRegistrationForm(data)
        self.assertEqual(form.errors["termsAccepted"], ["You must accept the terms and conditions to register"])

    def test_reset_password_confirmation(self):
        form = ResetPasswordForm({"password": "Secret!1", "confirm_password": "Secret!2"})
        self.assertEqual(form.errors["confirm_password"], ["Passwords do not match"])


class VendorApplicationFormTests(SimpleTestCase):
    def test_document_goes_to_files(self):
        document = SimpleUploadedFile("reg.pdf", b"%PDF", content_type="application/pdf")
        form = VendorApplicationForm(
            {"ownerName": "Alice", "username": "alice_vendor", "password": "Secret!1", "email": "a@example.com",
             "businessName": "Alice Shop", "businessType": "Retail", "city": "Kathmandu", "country": "Nepal"},
            {"registrationDocument": document},
        )
        self.assertTrue(form.is_valid(), form.errors)
        values, files = form.payload()
        self.assertEqual(files, {"registrationDocument": document})
        self.assertNotIn("website", values)
        self.assertEqual(values["businessName"], "Alice Shop")


# ---------------- Views ----------------

class LoginViewTests(BaseSetup):
    def test_login_page_renders(self):
        resp = self.client.get(reverse("accounts:login"))
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, "accounts/login.html")

    def test_login_redirects_to_role_dashboard(self):
        login = self.patch("users.login", return_value=ActionResponse(
            data={"id": 8, "role": "vendor"}, status=200, msg="Logged in successfully!"))
        resp = self.client.post(reverse("accounts:login"), {"email": "a@example.com", "password": "Secret!1"})

        self.assertRedirects(resp, reverse("dashboard:vendor_home"), fetch_redirect_response=False)
        self.assertEqual(login.call_args.args[1:], ("a@example.com", "Secret!1"))

    def test_login_honours_safe_next(self):
        self.patch("users.login", return_value=ActionResponse(data={"id": 7, "role": "user"}, status=200))
        url = f"{reverse('accounts:login')}?next={reverse('ecommerce:checkout')}"
        resp = self.client.post(url, {"email": "b@example.com", "password": "Secret!1"})
        self.assertRedirects(resp, reverse("ecommerce:checkout"), fetch_redirect_response=False)

    def test_failed_login_shows_backend_error(self):
        self.patch("users.login", return_value=ActionResponse(error="Invalid credentials", status=401))
        resp = self.client.post(reverse("accounts:login"), {"email": "b@example.com", "password": "wrong-1"})

        self.assertEqual(resp.status_code, 200)
        self.assertIn("Invalid credentials", resp.context["form"].non_field_errors())

    def test_superadmin_login_uses_its_own_endpoint(self):
        login = self.patch("users.login_superadmin", return_value=ActionResponse(
            data={"id": 1, "role": "superadmin"}, status=200))
        resp = self.client.post(reverse("accounts:superadmin_login"),
                                {"email": "root@example.com", "password": "Secret!1"})
        self.assertRedirects(resp, reverse("dashboard:superadmin_home"), fetch_redirect_response=False)
        login.assert_called_once()

    def test_logout_requires_post(self):
        sign_out = self.patch("users.sign_out", return_value=ActionResponse(status=200, msg="Logged out"))
        self.assertEqual(self.client.get(reverse("accounts:logout")).status_code, 405)

        resp = self.client.post(reverse("accounts:logout"))
        self.assertRedirects(resp, reverse("accounts:login"), fetch_redirect_response=False)
        sign_out.assert_called_once()


class RegistrationViewTests(BaseSetup):
    def test_register_sends_payload(self):
        register = self.patch("users.register_user", return_value=ActionResponse(
            data={}, status=201, msg="Verification email sent."))
        resp = self.client.post(reverse("accounts:register"), REGISTRATION)

        self.assertRedirects(resp, reverse("accounts:login"), fetch_redirect_response=False)
        self.assertEqual(register.call_args.args[1]["email"], "b@example.com")
        self.assertIn("Verification email sent.", [str(m) for m in get_messages(resp.wsgi_request)])

    def test_backend_rejection_keeps_form(self):
        self.patch("users.register_user", return_value=ActionResponse(error="Email already registered", status=400))
        resp = self.client.post(reverse("accounts:register"), REGISTRATION)
        self.assertContains(resp, "Email already registered")

    def test_verify_otp(self):
        verify = self.patch("users.verify_otp", return_value=ActionResponse(data={}, status=200, msg="Account verified"))
        resp = self.client.post(reverse("accounts:verify_otp", args=["tok123"]), {"otp_code": "123456"})

        self.assertRedirects(resp, reverse("accounts:login"), fetch_redirect_response=False)
        self.assertEqual(verify.call_args.args[1:], ("tok123", "123456"))

    def test_verify_otp_rejects_bad_code_locally(self):
        verify = self.patch("users.verify_otp")
        resp = self.client.post(reverse("accounts:verify_otp", args=["tok123"]), {"otp_code": "12ab"})
        self.assertContains(resp, "Enter the 6 digit code.")
        verify.assert_not_called()

    def test_resend_otp(self):
        resend = self.patch("users.resend_otp", return_value=ActionResponse(status=200, msg="New OTP sent successfully!"))
        resp = self.client.post(reverse("accounts:resend_otp", args=["tok123"]))
        self.assertRedirects(resp, reverse("accounts:verify_otp", args=["tok123"]), fetch_redirect_response=False)
        resend.assert_called_once()

    def test_reset_password(self):
        reset = self.patch("users.reset_password", return_value=ActionResponse(data={}, status=200))
        resp = self.client.post(reverse("accounts:reset_password", args=["tok"]),
                                {"password": "Secret!1", "confirm_password": "Secret!1"})
        self.assertRedirects(resp, reverse("accounts:login"), fetch_redirect_response=False)
        self.assertEqual(reset.call_args.args[1:], ("tok", "Secret!1"))

    def test_vendor_application_uploads_document(self):
        create = self.patch("vendors.create_vendor", return_value=ActionResponse(data={}, status=201))
        document = SimpleUploadedFile("reg.pdf", b"%PDF", content_type="application/pdf")
        resp = self.client.post(reverse("accounts:vendor_apply"), {
            "ownerName": "Alice", "username": "alice_vendor", "password": "Secret!1", "email": "a@example.com",
            "businessName": "Alice Shop", "businessType": "Retail", "city": "Kathmandu", "country": "Nepal",
            "registrationDocument": document,
        })

        self.assertRedirects(resp, reverse("core:home"), fetch_redirect_response=False)
        values, files = create.call_args.args[1:]
        self.assertEqual(values["ownerName"], "Alice")
        self.assertEqual(files["registrationDocument"].name, "reg.pdf")
