"""API tests for vendor registration, confirmation, login and the vendor area."""

from __future__ import annotations

import io
from datetime import date, timedelta
from decimal import Decimal
from smtplib import SMTPException
from unittest import mock

from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone
from PIL import Image
from rest_framework import status
from rest_framework.test import APITestCase

from apps.rentals.models import Mietfach, Vertrag
from apps.trials.models import StoreSettings
from apps.trials.services import activate_trial
from apps.users.models import Address, PendingBooking, User, VendorProfile

PACKAGE_DATA = {
    "package_counts": {"block-a": 2, "block-cold": 1, "block-table": 1},
    "rental_duration": 6,
    "provision_type": "basic",
    "zusatzleistungen": {},
}


def registration_payload(**overrides):
    payload = {
        "email": "hof@example.com",
        "password": "Sicher!Pass1",
        "password_confirm": "Sicher!Pass1",
        "name": "Anna Müller",
        "phone": "0911 123456",
        "unternehmen": "Hof Müller",
        "strasse": "Dorfstraße",
        "hausnummer": "12",
        "plz": "91301",
        "ort": "Forchheim",
        "package_data": PACKAGE_DATA,
    }
    payload.update(overrides)
    return payload


def create_vendor(email: str = "hof@example.com", **extra) -> User:
    extra.setdefault("name", "Anna Müller")
    extra.setdefault("is_full_account", True)
    extra.setdefault("contact_status", User.ContactStatus.ACTIVE)
    extra.setdefault("newsletter_confirmed", True)
    return User.objects.create_user(email=email, password="Sicher!Pass1", **extra)


class VendorRegistrationTests(APITestCase):
    def test_register_creates_account_pending_booking_and_sends_mail(self) -> None:
        response = self.client.post(reverse("vendor-register"), registration_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["email_sent"])
        self.assertEqual(response.data["price_breakdown"]["monthly_total"], "160.00")

        user = User.objects.get(email="hof@example.com")
        self.assertTrue(user.is_full_account)
        self.assertEqual(user.contact_status, User.ContactStatus.PENDING)
        self.assertIsNotNone(user.confirmation_token)
        self.assertEqual(user.primary_address.plz, "91301")
        self.assertEqual(user.vendor_profile.unternehmen, "Hof Müller")

        pending = PendingBooking.objects.get(user=user)
        self.assertEqual(pending.status, PendingBooking.Status.PENDING)
        self.assertEqual(pending.package_data["package_counts"]["block-a"], 2)

        self.assertEqual(len(mail.outbox), 1)
        body = mail.outbox[0].body
        self.assertIn("2 x Verkaufsblock Lage A", body)
        self.assertIn("1 x Verkaufsblock gekühlt", body)
        self.assertIn("1 x Verkaufstisch", body)
        self.assertIn(user.confirmation_token, body)

    def test_register_rejects_existing_full_account(self) -> None:
        create_vendor()

        response = self.client.post(reverse("vendor-register"), registration_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertEqual(User.objects.filter(email="hof@example.com").count(), 1)

    def test_register_upgrades_newsletter_account(self) -> None:
        subscriber = User.objects.create_user(email="hof@example.com", mail_newsletter=True)

        response = self.client.post(reverse("vendor-register"), registration_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        subscriber.refresh_from_db()
        self.assertEqual(response.data["user_id"], subscriber.pk)
        self.assertTrue(subscriber.is_full_account)
        self.assertTrue(subscriber.check_password("Sicher!Pass1"))

    def test_registered_vendor_is_preregistered_and_can_start_trial(self) -> None:
        response = self.client.post(reverse("vendor-register"), registration_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        user = User.objects.get(email="hof@example.com")
        self.assertEqual(user.registration_status, User.RegistrationStatus.PREREGISTERED)

        activate_trial(user)

        user.refresh_from_db()
        self.assertEqual(user.registration_status, User.RegistrationStatus.TRIAL_ACTIVE)
        self.assertIsNotNone(user.trial_end_date)

    def test_register_keeps_account_when_mail_fails(self) -> None:
        with mock.patch("apps.notifications.services.send_mail", side_effect=SMTPException("down")):
            response = self.client.post(reverse("vendor-register"), registration_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertFalse(response.data["email_sent"])
        self.assertTrue(User.objects.filter(email="hof@example.com").exists())

    def test_register_requires_a_package(self) -> None:
        payload = registration_payload(package_data={**PACKAGE_DATA, "package_counts": {"block-a": 0}})

        response = self.client.post(reverse("vendor-register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("package_data", response.data)

    def test_register_rejects_weak_password(self) -> None:
        payload = registration_payload(password="schwach", password_confirm="schwach")

        response = self.client.post(reverse("vendor-register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", response.data)

    def test_validate_step_reports_field_errors(self) -> None:
        url = reverse("vendor-validate-step")

        response = self.client.post(url, {"step": 3, "data": {"strasse": "Dorfstraße", "plz": "123"}}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["valid"])
        self.assertIn("plz", response.data["errors"])
        self.assertIn("hausnummer", response.data["errors"])

        response = self.client.post(url, {"step": 2, "data": {"name": "Anna"}}, format="json")
        self.assertTrue(response.data["valid"])

    def test_validate_step_flags_registered_email(self) -> None:
        create_vendor()

        response = self.client.post(
            reverse("vendor-validate-step"),
            {"step": 1, "data": {"email": "hof@example.com", "password": "Sicher!Pass1"}},
            format="json",
        )

        self.assertFalse(response.data["valid"])
        self.assertIn("email", response.data["errors"])


class EmailConfirmationTests(APITestCase):
    def test_valid_token_activates_contact(self) -> None:
        user = create_vendor(contact_status=User.ContactStatus.PENDING, newsletter_confirmed=False)
        token = user.issue_confirmation_token()
        user.save()

        response = self.client.get(reverse("vendor-confirm", args=[token]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        user.refresh_from_db()
        self.assertTrue(user.newsletter_confirmed)
        self.assertEqual(user.contact_status, User.ContactStatus.ACTIVE)
        self.assertIsNone(user.confirmation_token)

    def test_expired_or_unknown_token_is_rejected(self) -> None:
        user = create_vendor(contact_status=User.ContactStatus.PENDING)
        token = user.issue_confirmation_token()
        user.token_expires = timezone.now() - timedelta(minutes=1)
        user.save()

        for value in (token, "unbekannt"):
            response = self.client.get(reverse("vendor-confirm", args=[value]))
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data["message"], "Ungültiger oder abgelaufener Bestätigungs-Link")


class VendorLoginTests(APITestCase):
    def setUp(self) -> None:
        self.user = create_vendor()
        self.url = reverse("vendor-login")

    def test_login_returns_tokens_and_summary(self) -> None:
        PendingBooking.objects.create(user=self.user, package_data=PACKAGE_DATA)

        response = self.client.post(self.url, {"email": "HOF@example.com", "password": "Sicher!Pass1"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data["tokens"])
        self.assertTrue(response.data["user"]["has_pending_booking"])
        self.assertTrue(response.data["user"]["is_vendor"])

    def test_wrong_password_is_unauthorized(self) -> None:
        response = self.client.post(self.url, {"email": "hof@example.com", "password": "Falsch!1"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_newsletter_account_cannot_log_in(self) -> None:
        User.objects.create_user(email="leser@example.com", password="Sicher!Pass1")

        response = self.client.post(self.url, {"email": "leser@example.com", "password": "Sicher!Pass1"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_account_locks_after_five_failures(self) -> None:
        for _ in range(5):
            self.client.post(self.url, {"email": "hof@example.com", "password": "Falsch!1"}, format="json")

        self.user.refresh_from_db()
        self.assertTrue(self.user.is_locked)
        response = self.client.post(self.url, {"email": "hof@example.com", "password": "Sicher!Pass1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        # After lock expires the vendor can log in again
        self.user.locked_until = timezone.now() - timedelta(minutes=1)
        self.user.save(update_fields=["locked_until"])
        response = self.client.post(self.url, {"email": "hof@example.com", "password": "Sicher!Pass1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_admin_login_rejects_vendor(self) -> None:
        User.objects.create_user(email="admin@housnkuh.de", password="Admin!Pass1", role=User.RoleChoices.ADMIN)
        url = reverse("auth:login")

        response = self.client.post(url, {"email": "hof@example.com", "password": "Sicher!Pass1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        response = self.client.post(url, {"email": "admin@housnkuh.de", "password": "Admin!Pass1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["user"]["role"], "admin")


class PreregistrationTests(APITestCase):
    def payload(self):
        payload = registration_payload()
        payload.pop("package_data")
        payload.pop("password_confirm")
        return payload

    def test_preregister_before_opening(self) -> None:
        StoreSettings.objects.create(store_opening_enabled=True, opening_date=timezone.now() + timedelta(days=10))

        response = self.client.post(reverse("vendor-preregister"), self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["days_until_opening"], 10)
        user = User.objects.get(email="hof@example.com")
        self.assertEqual(user.registration_status, User.RegistrationStatus.PREREGISTERED)
        self.assertFalse(user.is_publicly_visible)
        self.assertFalse(user.pending_bookings.exists())

    def test_preregister_blocked_once_store_is_open(self) -> None:
        StoreSettings.objects.create(store_opening_enabled=True, opening_date=timezone.now() - timedelta(days=1))

        response = self.client.post(reverse("vendor-preregister"), self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.filter(email="hof@example.com").exists())


class VendorAreaTests(APITestCase):
    def setUp(self) -> None:
        self.user = create_vendor(is_publicly_visible=True)
        Address.objects.create(user=self.user, strasse="Dorfstraße", hausnummer="12", plz="91301", ort="Forchheim")
        VendorProfile.objects.create(user=self.user, unternehmen="Hof Müller", beschreibung="Eier und Honig")
        self.client.force_authenticate(self.user)

    def test_profile_of_other_vendor_is_forbidden(self) -> None:
        other = create_vendor(email="andere@example.com")

        response = self.client.get(reverse("vendor-profile", args=[other.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["message"], "Zugriff verweigert")

    def test_profile_update(self) -> None:
        url = reverse("vendor-profile", args=[self.user.pk])

        response = self.client.put(url, {"name": "Anna M.", "profile": {"slogan": "Frisch vom Hof"}}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, "Anna M.")
        self.assertEqual(VendorProfile.objects.get(user=self.user).slogan, "Frisch vom Hof")

    def test_image_upload(self) -> None:
        buffer = io.BytesIO()
        Image.new("RGB", (10, 10), "green").save(buffer, format="PNG")
        image = SimpleUploadedFile("hof.png", buffer.getvalue(), content_type="image/png")

        response = self.client.post(reverse("vendor-upload-image"), {"image": image}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("vendor-images/vendor-", response.data["image_url"])

    def test_image_upload_rejects_non_images(self) -> None:
        upload = SimpleUploadedFile("notes.txt", b"kein bild", content_type="text/plain")

        response = self.client.post(reverse("vendor-upload-image"), {"image": upload}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])

    def test_public_vendor_list_hides_invisible_vendors(self) -> None:
        create_vendor(email="versteckt@example.com", is_publicly_visible=False)
        self.client.force_authenticate(None)

        response = self.client.get(reverse("public-vendor-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data
        self.assertEqual([vendor["id"] for vendor in results], [self.user.pk])

    def test_public_vendor_detail_unknown_is_404(self) -> None:
        hidden = create_vendor(email="versteckt@example.com", is_publicly_visible=False)
        self.client.force_authenticate(None)

        response = self.client.get(reverse("public-vendor-detail", args=[hidden.pk]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Direktvermarkter nicht gefunden")

    def test_additional_booking_only_once_while_pending(self) -> None:
        url = reverse("vendor-additional-booking")
        payload = {"package_data": {**PACKAGE_DATA, "package_counts": {"block-b": 1}}, "comments": "Ab Mai"}

        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["pending_booking"]["price_breakdown"]["monthly_total"], "15.00")

        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_trial_cancel(self) -> None:
        start = timezone.localdate()
        contract = Vertrag.objects.create(
            user=self.user,
            status=Vertrag.Status.SCHEDULED,
            scheduled_start_date=start,
            availability_from=start,
            availability_to=start + timedelta(days=90),
            ist_probemonat_buchung=True,
            zahlungspflichtig_ab=start + timedelta(days=30),
        )
        url = reverse("vendor-trial-cancel", args=[contract.pk])

        response = self.client.post(url, {"reason": "Zu wenig Zeit"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        contract.refresh_from_db()
        self.assertEqual(contract.status, Vertrag.Status.CANCELLED)
        self.assertTrue(contract.gekuendigt_in_probemonat)

        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_contract_list_shows_own_contracts(self) -> None:
        other = create_vendor(email="andere@example.com")
        for owner in (self.user, other):
            Vertrag.objects.create(
                user=owner,
                scheduled_start_date=date(2026, 1, 1),
                availability_from=date(2026, 1, 1),
                availability_to=date(2026, 4, 1),
            )

        response = self.client.get(reverse("vendor-contracts"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data
        self.assertEqual(len(results), 1)


class PendingBookingAdminTests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@housnkuh.de",
            password="Admin!Pass1",
            role=User.RoleChoices.ADMIN,
        )
        self.vendor = create_vendor()
        self.pending = PendingBooking.objects.create(
            user=self.vendor,
            package_data={**PACKAGE_DATA, "package_counts": {"block-a": 1}},
        )
        self.regal = Mietfach.objects.create(bezeichnung="R-01", typ=Mietfach.Typ.REGAL)
        self.client.force_authenticate(self.admin)

    def test_list_open_bookings(self) -> None:
        response = self.client.get(reverse("pending-booking-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data
        self.assertEqual(len(results), 1)

    def test_confirm_creates_contract(self) -> None:
        url = reverse("pending-booking-confirm", args=[self.vendor.pk])
        payload = {
            "assigned_mietfaecher": [self.regal.pk],
            "price_adjustments": {str(self.regal.pk): "30.00"},
            "scheduled_start_date": "2026-03-01",
        }

        response = self.client.post(url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["email_sent"])
        contract = Vertrag.objects.get(user=self.vendor)
        self.assertEqual(contract.status, Vertrag.Status.SCHEDULED)
        self.assertEqual(contract.total_monthly_price, Decimal("30.00"))
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, PendingBooking.Status.COMPLETED)

        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_reject_marks_booking_cancelled(self) -> None:
        url = reverse("pending-booking-reject", args=[self.vendor.pk])

        response = self.client.post(url, {"reason": "Kein Platz"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, PendingBooking.Status.CANCELLED)
        self.assertEqual(self.pending.rejection_reason, "Kein Platz")
        self.assertEqual(len(mail.outbox), 1)

    def test_vendor_cannot_confirm(self) -> None:
        self.client.force_authenticate(self.vendor)

        response = self.client.post(reverse("pending-booking-confirm", args=[self.vendor.pk]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
