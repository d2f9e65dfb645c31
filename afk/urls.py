from django.urls import path
from .views import (
    AfkStartView,
    AfkHeartbeatView,
    AfkStopView,
    AfkStatusView,
    AfkSettingsView,
)

urlpatterns = [
    path("start", AfkStartView.as_view(), name="afk-start"),
    path("heartbeat", AfkHeartbeatView.as_view(), name="afk-heartbeat"),
    path("stop", AfkStopView.as_view(), name="afk-stop"),
    path("status", AfkStatusView.as_view(), name="afk-status"),
    path("settings", AfkSettingsView.as_view(), name="afk-settings"),
]
