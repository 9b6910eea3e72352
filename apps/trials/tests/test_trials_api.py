"""API tests for store settings, trial administration and the vendor trial status."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.rentals.models import Vertrag
from apps.trials.models import StoreSettings
from apps.users.models import User


class TrialAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@housnkuh.de",
            password="Admin!Pass1",
            role=User.RoleChoices.ADMIN,
        )
        self.vendor = User.objects.create_user(
            email="hof@example.com",
            password="Sicher!Pass1",
            is_full_account=True,
            registration_status=User.RegistrationStatus.PREREGISTERED,
        )
        self.client.force_authenticate(self.admin)

    def test_update_store_settings_bumps_version(self) -> None:
        opening = timezone.now() + timedelta(days=14)
        payload = {"store_opening_enabled": True, "opening_date": opening.isoformat()}

        response = self.client.put(reverse("store-settings"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["version"], 2)
        self.assertEqual(response.data["modified_by"], self.admin.email)
        self.assertFalse(response.data["is_store_open"])
        self.assertEqual(response.data["days_until_opening"], 14)

    def test_enabling_opening_requires_date(self) -> None:
        response = self.client.put(reverse("store-settings"), {"store_opening_enabled": True}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("opening_date", response.data)

    def test_manual_activation(self) -> None:
        response = self.client.post(reverse("trial-activate", args=[self.vendor.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.registration_status, User.RegistrationStatus.TRIAL_ACTIVE)

        response = self.client.post(reverse("trial-activate", args=[self.vendor.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_activate_preregistered_before_opening_is_rejected(self) -> None:
        response = self.client.post(reverse("trial-activate-preregistered"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_activate_preregistered_after_opening(self) -> None:
        StoreSettings.objects.create(store_opening_enabled=True, opening_date=timezone.now() - timedelta(minutes=5))

        response = self.client.post(reverse("trial-activate-preregistered"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["activated"], 1)

    def test_update_statuses_and_statistics(self) -> None:
        response = self.client.post(reverse("trial-update-statuses"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["checked"], 0)

        response = self.client.get(reverse("trial-statistics"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["preregistered"], 1)

    def test_vendor_cannot_manage_trials(self) -> None:
        self.client.force_authenticate(self.vendor)

        response = self.client.get(reverse("store-settings"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class VendorTrialStatusAPITests(APITestCase):
    def test_trial_status_lists_trial_bookings(self) -> None:
        now = timezone.now()
        vendor = User.objects.create_user(
            email="hof@example.com",
            password="Sicher!Pass1",
            is_full_account=True,
            registration_status=User.RegistrationStatus.TRIAL_ACTIVE,
            trial_start_date=now,
            trial_end_date=now + timedelta(days=30),
        )
        today = timezone.localdate()
        contract = Vertrag.objects.create(
            user=vendor,
            status=Vertrag.Status.SCHEDULED,
            scheduled_start_date=today,
            availability_from=today,
            availability_to=today + timedelta(days=120),
            ist_probemonat_buchung=True,
            zahlungspflichtig_ab=today + timedelta(days=31),
        )
        self.client.force_authenticate(vendor)

        response = self.client.get(reverse("vendor-trial-status"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["is_trial_active"])
        self.assertEqual(response.data["days_remaining"], 30)
        booking = response.data["trial_bookings"][0]
        self.assertEqual(booking["id"], contract.pk)
        self.assertTrue(booking["can_cancel"])
