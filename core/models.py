# core/models.py
from django.db import models
from django.conf import settings


class AuditLog(models.Model):
    """
    Business-level audit trail (admin changes, forced session terminations).
    actor is null when the system itself performed the action.
    """
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="audit_entries",
    )
    action = models.CharField(max_length=64, db_index=True)
    details = models.JSONField(default=dict, blank=True)
    ip = models.GenericIPAddressField(null=True, blank=True)
    created = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created",)
        indexes = [models.Index(fields=["action", "created"], name="idx_audit_action_created")]

    def __str__(self):
        return f"{self.action} by {self.actor_id or 'system'} @ {self.created}"
