"""URL declarations for the vendor API (/api/vendor-auth/)."""

from __future__ import annotations

from django.urls import path  # type: ignore

from apps.trials.views import VendorTrialStatusView

from .auth_views import (
    ConfirmEmailView,
    ValidateStepView,
    VendorLoginView,
    VendorPreregisterView,
    VendorRegisterView,
)
from .views import (
    AdditionalBookingView,
    PublicVendorDetailView,
    PublicVendorListView,
    TrialCancelView,
    VendorContractListView,
    VendorImageUploadView,
    VendorProfileView,
)

urlpatterns = [
    path("validate-step/", ValidateStepView.as_view(), name="vendor-validate-step"),
    path("register/", VendorRegisterView.as_view(), name="vendor-register"),
    path("preregister/", VendorPreregisterView.as_view(), name="vendor-preregister"),
    path("confirm/<str:token>/", ConfirmEmailView.as_view(), name="vendor-confirm"),
    path("login/", VendorLoginView.as_view(), name="vendor-login"),
    path("profile/<int:user_id>/", VendorProfileView.as_view(), name="vendor-profile"),
    path("upload-image/", VendorImageUploadView.as_view(), name="vendor-upload-image"),
    path("public/vendors/", PublicVendorListView.as_view(), name="public-vendor-list"),
    path("public/vendors/<int:pk>/", PublicVendorDetailView.as_view(), name="public-vendor-detail"),
    path("additional-booking/", AdditionalBookingView.as_view(), name="vendor-additional-booking"),
    path("contracts/", VendorContractListView.as_view(), name="vendor-contracts"),
    path("contracts/<int:pk>/trial-cancel/", TrialCancelView.as_view(), name="vendor-trial-cancel"),
    path("trial-status/", VendorTrialStatusView.as_view(), name="vendor-trial-status"),
]
