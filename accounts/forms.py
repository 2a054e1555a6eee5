from __future__ import annotations

import re

from django import forms

from ecommerce.forms import MOBILE_VALIDATOR

SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def validate_password_strength(value: str) -> None:
    if not re.search(r"[A-Z]", value):
        raise forms.ValidationError("Password must contain at least one uppercase letter")
    if not SPECIAL_CHARACTERS.search(value):
        raise forms.ValidationError("Password must contain at least one special character")


def _password_field(**kwargs) -> forms.CharField:
    return forms.CharField(
        min_length=6,
        widget=forms.PasswordInput,
        validators=[validate_password_strength],
        error_messages={"min_length": "Password must be at least 6 characters"},
        **kwargs,
    )


class LoginForm(forms.Form):
    email = forms.CharField()
    password = forms.CharField(min_length=6, widget=forms.PasswordInput,
                               error_messages={"min_length": "Password must be at least 6 characters"})


class UserRegistrationForm(forms.Form):
    """Buyer sign-up. The backend mails an OTP link once this is accepted."""
    GENDERS = [("", "---"), ("male", "Male"), ("female", "Female"), ("other", "Other"),
               ("prefer-not-to-say", "Prefer not to say")]

    firstName = forms.CharField(min_length=2, max_length=100, error_messages={
        "min_length": "First name must be at least 2 characters.",
        "max_length": "First name must be at most 100 characters.",
    })
    lastName = forms.CharField(min_length=2, max_length=100, error_messages={
        "min_length": "Last name must be at least 2 characters.",
        "max_length": "Last name must be at most 100 characters.",
    })
    username = forms.CharField(min_length=3, error_messages={"min_length": "Username must be at least 3 characters"})
    email = forms.EmailField(error_messages={"invalid": "Please enter a valid email"})
    mobile = forms.CharField(validators=[MOBILE_VALIDATOR])
    dateOfBirth = forms.DateField(required=False, widget=forms.DateInput(attrs={"type": "date"}))
    gender = forms.ChoiceField(choices=GENDERS, required=False)
    address = forms.CharField(required=False)
    city = forms.CharField(required=False)
    state = forms.CharField(required=False)
    country = forms.CharField(required=False)
    postalCode = forms.CharField(required=False)
    password = _password_field()
    confirmPassword = forms.CharField(widget=forms.PasswordInput)
    termsAccepted = forms.BooleanField(error_messages={
        "required": "You must accept the terms and conditions to register",
    })

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("password") and cleaned.get("password") != cleaned.get("confirmPassword"):
            self.add_error("confirmPassword", "Passwords do not match")
        return cleaned

    def payload(self) -> dict:
        data = dict(self.cleaned_data)
        data.pop("confirmPassword", None)
        data.pop("termsAccepted", None)
        if data.get("dateOfBirth"):
            data["dateOfBirth"] = data["dateOfBirth"].isoformat()
        else:
            data.pop("dateOfBirth", None)
        return {k: v for k, v in data.items() if v not in ("", None)}


class VendorApplicationForm(forms.Form):
    ownerName = forms.CharField(min_length=3, error_messages={"min_length": "Owner name is required"})
    username = forms.CharField(min_length=3, error_messages={"min_length": "Username must be at least 3 characters"})
    password = _password_field()
    email = forms.EmailField(error_messages={"invalid": "Invalid email address"})
    phone = forms.CharField(required=False)
    businessName = forms.CharField(min_length=2, error_messages={"min_length": "Business name is required"})
    businessType = forms.CharField(min_length=2, error_messages={"min_length": "Business type is required"})
    businessDescription = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))
    registrationNumber = forms.CharField(required=False)
    registrationDocument = forms.FileField(error_messages={"required": "Registration document is required"})
    address = forms.CharField(required=False)
    city = forms.CharField(min_length=2, error_messages={"min_length": "City is required"})
    country = forms.CharField(min_length=2, error_messages={"min_length": "Country is required"})
    website = forms.URLField(required=False, error_messages={"invalid": "Invalid URL"})

    def payload(self) -> tuple[dict, dict]:
        data = dict(self.cleaned_data)
        document = data.pop("registrationDocument")
        return {k: v for k, v in data.items() if v not in ("", None)}, {"registrationDocument": document}


class VendorProfileForm(forms.Form):
    ownerName = forms.CharField(error_messages={"required": "Owner Name is required"})
    email = forms.EmailField(error_messages={"invalid": "Invalid email"})
    phone = forms.CharField(required=False)
    businessName = forms.CharField(error_messages={"required": "Business Name is required"})
    businessType = forms.CharField(error_messages={"required": "Business Type is required"})
    businessDescription = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))
    registrationNumber = forms.CharField(required=False)
    address = forms.CharField(required=False)
    city = forms.CharField(required=False)
    country = forms.CharField(required=False)
    website = forms.CharField(required=False)


class UserProfileForm(forms.Form):
    firstName = forms.CharField(error_messages={"required": "First Name is required"})
    lastName = forms.CharField(error_messages={"required": "Last Name is required"})
    email = forms.EmailField(error_messages={"invalid": "Invalid email address"})
    username = forms.CharField(error_messages={"required": "Username is required"})
    mobile = forms.CharField(required=False)
    dateOfBirth = forms.DateField(required=False, widget=forms.DateInput(attrs={"type": "date"}))
    address = forms.CharField(required=False)
    city = forms.CharField(required=False)
    state = forms.CharField(required=False)
    country = forms.CharField(required=False)
    postalCode = forms.CharField(required=False)

    def payload(self) -> dict:
        data = dict(self.cleaned_data)
        data["dateOfBirth"] = data["dateOfBirth"].isoformat() if data.get("dateOfBirth") else None
        return data


class OTPForm(forms.Form):
    otp_code = forms.RegexField(regex=r"^\d{6}$", error_messages={"invalid": "Enter the 6 digit code."})


class ForgotPasswordForm(forms.Form):
    email = forms.EmailField()


class ResetPasswordForm(forms.Form):
    password = _password_field()
    confirm_password = forms.CharField(widget=forms.PasswordInput)

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("password") and cleaned.get("password") != cleaned.get("confirm_password"):
            self.add_error("confirm_password", "Passwords do not match")
        return cleaned
