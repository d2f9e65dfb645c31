import datetime as dt
from io import StringIO

import pytest
from django.apps import apps
from django.core.management import call_command

from afk.apps import AfkAppConfig
from afk.models import AfkSession

pytestmark = pytest.mark.django_db


def test_reap_command_closes_idle_sessions(user):
    stale = dt.datetime.now(dt.timezone.utc) - dt.timedelta(hours=1)
    AfkSession.objects.create(
        user=user,
        started_at=stale,
        last_heartbeat_at=stale,
        is_active=True,
        last_reset_date=stale.date(),
    )
    out = StringIO()

    call_command("reap_afk_sessions", "--idle-seconds", "600", stdout=out)

    assert "Closed 1 idle AFK session(s)" in out.getvalue()
    assert not AfkSession.objects.filter(user=user, is_active=True).exists()


def test_app_config_registered():
    assert isinstance(apps.get_app_config("afk"), AfkAppConfig)
