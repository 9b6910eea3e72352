"""API tests for the package catalog and price calculation endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase


class PricingAPITests(APITestCase):
    def test_catalog_lists_packages_and_provisions(self) -> None:
        response = self.client.get(reverse("pricing-catalog"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        package_ids = [package["id"] for package in response.data["packages"]]
        self.assertIn("block-a", package_ids)
        other = next(p for p in response.data["packages"] if p["id"] == "block-other")
        self.assertTrue(other["price_on_request"])
        self.assertEqual(other["price_display"], "auf Anfrage")
        rates = {p["id"]: p["rate"] for p in response.data["provision_types"]}
        self.assertEqual(rates, {"basic": 4, "premium": 7})

    def test_calculate_returns_breakdown(self) -> None:
        payload = {
            "package_counts": {"block-a": 2, "block-table": 1},
            "rental_duration": 6,
            "provision_type": "basic",
        }
        response = self.client.post(reverse("pricing-calculate"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        breakdown = response.data["breakdown"]
        self.assertEqual(breakdown["monthly_total"], "110.00")
        self.assertEqual(breakdown["total"], "627.00")
        self.assertEqual(breakdown["discount_percent"], 5)

    def test_calculate_empty_selection(self) -> None:
        payload = {"package_counts": {}, "rental_duration": 3}
        response = self.client.post(reverse("pricing-calculate"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIsNone(response.data["breakdown"])

    def test_calculate_rejects_invalid_duration_and_package(self) -> None:
        response = self.client.post(
            reverse("pricing-calculate"),
            {"package_counts": {"block-x": 1}, "rental_duration": 30},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("package_counts", response.data)
        self.assertIn("rental_duration", response.data)
