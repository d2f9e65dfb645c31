# afk/management/commands/reap_afk_sessions.py
from django.core.management.base import BaseCommand

from afk.sessions import SessionManager


class Command(BaseCommand):
    help = "Force-terminate AFK sessions whose client stopped sending heartbeats."

    def add_arguments(self, parser):
        parser.add_argument("--idle-seconds", type=int, default=None,
                            help="Close sessions idle longer than N seconds "
                                 "(default: AFK_IDLE_TIMEOUT_SECONDS)")

    def handle(self, *args, **opts):
        closed = SessionManager().reap_idle(opts["idle_seconds"])
        self.stdout.write(self.style.SUCCESS(f"Done. Closed {closed} idle AFK session(s)."))
