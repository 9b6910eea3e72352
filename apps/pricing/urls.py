"""URL routing for the pricing API."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import CalculatePriceView, CatalogView

urlpatterns = [
    path("catalog/", CatalogView.as_view(), name="pricing-catalog"),
    path("calculate/", CalculatePriceView.as_view(), name="pricing-calculate"),
]
