from django.contrib import admin
from .models import AuditLog

@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("id", "action", "actor", "ip", "created")
    search_fields = ("actor__email", "action")
    list_filter = ("action", "created")
    date_hierarchy = "created"

    def has_change_permission(self, request, obj=None):
        return False
