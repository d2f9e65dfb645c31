from typing import Optional

from .models import AuditLog


def client_ip(request) -> Optional[str]:
    # Prefer first IP from X-Forwarded-For when behind a proxy
    fwd = request.META.get("HTTP_X_FORWARDED_FOR")
    if fwd:
        return fwd.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def make_audit_logger(actor=None, request=None):
    ip = client_ip(request) if request is not None else None

    def _save(action, **details):
        return AuditLog.objects.create(actor=actor, action=action, details=details, ip=ip)
    return _save
