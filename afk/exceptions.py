from rest_framework import status

from core.exceptions import DomainError


class FeatureDisabledError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "afk_disabled"
    default_detail = "AFK system is currently disabled."


class AlreadyActiveError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "afk_already_active"
    default_detail = "You already have an active AFK session."


class NoActiveSessionError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "afk_no_active_session"
    default_detail = "No active AFK session found."


class HeartbeatTooSoonError(DomainError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "afk_heartbeat_too_soon"
    default_detail = "Heartbeat received too soon after the previous one."
