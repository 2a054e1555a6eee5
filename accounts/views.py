from __future__ import annotations

import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse, reverse_lazy
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST
from django.views.generic import FormView

from ecommerce.actions import users as user_actions
from ecommerce.actions import vendors as vendor_actions
from ecommerce.middleware import DASHBOARD_FOR_ROLE, ROLE_USER

from .forms import (
    ForgotPasswordForm,
    LoginForm,
    OTPForm,
    ResetPasswordForm,
    UserRegistrationForm,
    VendorApplicationForm,
)

logger = logging.getLogger(__name__)


def _dashboard_for(user: dict | None) -> str:
    role = ((user or {}).get("role") or ROLE_USER).lower()
    return reverse(DASHBOARD_FOR_ROLE.get(role, DASHBOARD_FOR_ROLE[ROLE_USER]))


class ActionFormView(FormView):
    """
    FormView whose valid form is handed to a backend action.
    A failed action is shown as a non-field error on the same form.
    """

    def run_action(self, form):
        raise NotImplementedError

    def form_valid(self, form):
        res = self.run_action(form)
        if not res.ok:
            form.add_error(None, res.error)
            return self.form_invalid(form)
        if res.msg:
            messages.success(self.request, res.msg)
        self.result = res
        return super().form_valid(form)


class LoginView(ActionFormView):
    """Exchange credentials for backend tokens and go to the right dashboard."""
    template_name = "accounts/login.html"
    form_class = LoginForm
    login_action = "login"

    def run_action(self, form):
        action = getattr(user_actions, self.login_action)
        return action(self.request, form.cleaned_data["email"], form.cleaned_data["password"])

    def get_success_url(self):
        raw = (self.request.POST.get("next") or self.request.GET.get("next", "")).strip()
        if raw and url_has_allowed_host_and_scheme(raw, allowed_hosts={self.request.get_host()}):
            return raw
        return _dashboard_for(self.result.data)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["next"] = self.request.GET.get("next", "")
        return ctx


class SuperadminLoginView(LoginView):
    template_name = "accounts/superadmin_login.html"
    login_action = "login_superadmin"


@require_POST
def logout_view(request):
    res = user_actions.sign_out(request)
    if res.ok:
        messages.success(request, "You have been logged out.")
    return redirect("accounts:login")


class RegisterView(ActionFormView):
    """Buyer sign-up; the backend emails an OTP link to finish it."""
    template_name = "accounts/register.html"
    form_class = UserRegistrationForm
    success_url = reverse_lazy("accounts:login")

    def run_action(self, form):
        return user_actions.register_user(self.request, form.payload())


class VerifyOTPView(ActionFormView):
    template_name = "accounts/verify_otp.html"
    form_class = OTPForm
    success_url = reverse_lazy("accounts:login")

    def run_action(self, form):
        return user_actions.verify_otp(self.request, self.kwargs["token"], form.cleaned_data["otp_code"])

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["token"] = self.kwargs["token"]
        return ctx


@require_POST
def resend_otp(request, token: str):
    res = user_actions.resend_otp(request, token)
    if res.ok:
        messages.success(request, res.msg)
    else:
        messages.error(request, res.error)
    return redirect("accounts:verify_otp", token=token)


class ForgotPasswordView(ActionFormView):
    template_name = "accounts/forgot_password.html"
    form_class = ForgotPasswordForm
    success_url = reverse_lazy("accounts:login")

    def run_action(self, form):
        return user_actions.forgot_password(self.request, form.cleaned_data["email"])


class ResetPasswordView(ActionFormView):
    template_name = "accounts/reset_password.html"
    form_class = ResetPasswordForm
    success_url = reverse_lazy("accounts:login")

    def run_action(self, form):
        return user_actions.reset_password(self.request, self.kwargs["token"], form.cleaned_data["password"])


class VendorApplyView(ActionFormView):
    """Vendor application with the registration document upload."""
    template_name = "accounts/vendor_apply.html"
    form_class = VendorApplicationForm
    success_url = reverse_lazy("core:home")

    def run_action(self, form):
        values, files = form.payload()
        return vendor_actions.create_vendor(self.request, values, files)
