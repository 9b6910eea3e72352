"""Store-wide settings for housnkuh."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class StoreSettings(models.Model):
    """Singleton mit der Store-Eröffnung; immer Zeile pk=1."""

    store_opening_enabled = models.BooleanField(_("Eröffnungsdatum aktiv"), default=False)
    opening_date = models.DateTimeField(_("Eröffnungsdatum"), null=True, blank=True)
    modified_by = models.CharField(max_length=150, blank=True)
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    last_modified = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Store-Einstellungen")
        verbose_name_plural = _("Store-Einstellungen")

    def __str__(self) -> str:
        return "Store-Einstellungen"

    def save(self, *args, **kwargs):  # type: ignore
        self.pk = 1
        if self._state.adding:
            created_at = type(self).objects.filter(pk=1).values_list("created_at", flat=True).first()
            if created_at is not None:
                self.created_at = created_at
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "StoreSettings":
        settings_obj, _created = cls.objects.get_or_create(pk=1)
        return settings_obj

    def is_store_open(self) -> bool:
        if not self.store_opening_enabled or not self.opening_date:
            return False
        return timezone.now() >= self.opening_date

    def days_until_opening(self) -> int | None:
        if not self.store_opening_enabled or not self.opening_date or self.is_store_open():
            return None
        remaining = (self.opening_date - timezone.now()).total_seconds()
        return int(-(-remaining // 86400))
