from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("login/", views.LoginView.as_view(), name="login"),
    path("superadmin/login/", views.SuperadminLoginView.as_view(), name="superadmin_login"),
    path("logout/", views.logout_view, name="logout"),
    path("register/", views.RegisterView.as_view(), name="register"),
    path("verify/<str:token>/", views.VerifyOTPView.as_view(), name="verify_otp"),
    path("verify/<str:token>/resend/", views.resend_otp, name="resend_otp"),
    path("forgot-password/", views.ForgotPasswordView.as_view(), name="forgot_password"),
    path("reset-password/<str:token>/", views.ResetPasswordView.as_view(), name="reset_password"),
    path("vendor/apply/", views.VendorApplyView.as_view(), name="vendor_apply"),
]
