"""Admin registrations for email templates."""

from __future__ import annotations

from django.contrib import admin

from .models import EmailTemplate


@admin.register(EmailTemplate)
class EmailTemplateAdmin(admin.ModelAdmin):
    list_display = ("name", "template_id", "type", "category", "is_active", "version", "last_modified")
    list_filter = ("category", "is_active", "type")
    search_fields = ("name", "template_id", "subject")
    readonly_fields = ("version", "last_modified", "modified_by")
