"""Mailer registry: one email adapter per process.

The fake adapter is the default. A real provider adapter can be installed
with ``set_mailer`` at application start-up.
"""

from storefront.notification.email_port import EmailPort

_mailer: EmailPort | None = None


def get_mailer() -> EmailPort:
    global _mailer
    if _mailer is None:
        from storefront.notification.fake_email import FakeEmailAdapter

        _mailer = FakeEmailAdapter()
    return _mailer


def set_mailer(mailer: EmailPort):
    global _mailer
    _mailer = mailer


def reset_mailer():
    """Drop the current adapter so the next ``get_mailer`` builds a fresh one."""
    global _mailer
    _mailer = None
