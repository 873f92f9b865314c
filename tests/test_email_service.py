import logging
import smtplib

from storefront.services import email_service as email_module
from storefront.services.email_service import EmailService


class _FakeSMTP:
    sent = []

    def __init__(self, host, port):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def send_message(self, msg):
        _FakeSMTP.sent.append(msg)


def _smtp_service():
    return EmailService(
        public_base_url="https://api.shop.test/",
        frontend_base_url="https://shop.test",
        smtp_host="smtp.shop.test",
        smtp_username="mailer",
        smtp_password="secret",
        from_email="noreply@shop.test",
    )


def test_links_point_at_the_right_surfaces():
    service = _smtp_service()
    assert service.verification_url("tok") == "https://api.shop.test/api/v1/verify/user/tok"
    assert service.reset_url("tok") == "https://shop.test/reset/password/tok"


def test_without_smtp_links_are_logged_at_debug_only(caplog):
    service = EmailService(public_base_url="http://localhost:8000", frontend_base_url="http://localhost:3000")
    assert service.enabled is False

    with caplog.at_level(logging.INFO, logger=email_module.__name__):
        assert service.send_verification_email("joypabs@gmail.com", "JoyPabs", "tok123") is True
        assert service.send_password_reset_email("joypabs@gmail.com", "JoyPabs", "tok456") is True
    assert "not sent" in caplog.text
    assert "tok123" not in caplog.text
    assert "tok456" not in caplog.text

    caplog.clear()
    with caplog.at_level(logging.DEBUG, logger=email_module.__name__):
        service.send_verification_email("joypabs@gmail.com", "JoyPabs", "tok123")
    assert "http://localhost:8000/api/v1/verify/user/tok123" in caplog.text


def test_reset_email_goes_through_smtp(monkeypatch):
    _FakeSMTP.sent = []
    monkeypatch.setattr(email_module.smtplib, "SMTP", _FakeSMTP)

    assert _smtp_service().send_password_reset_email("joypabs@gmail.com", "JoyPabs", "tok123") is True

    msg = _FakeSMTP.sent[0]
    assert msg["To"] == "joypabs@gmail.com"
    assert msg["From"] == "Storefront <noreply@shop.test>"
    assert "https://shop.test/reset/password/tok123" in msg.as_string()


def test_smtp_failure_returns_false(monkeypatch):
    def _refuse(host, port):
        raise smtplib.SMTPConnectError(421, "unavailable")

    monkeypatch.setattr(email_module.smtplib, "SMTP", _refuse)
    assert _smtp_service().send_verification_email("joypabs@gmail.com", "JoyPabs", "tok") is False


def test_image_storage_ignores_foreign_paths(image_storage, tmp_path):
    outside = tmp_path / "keep.txt"
    outside.write_text("keep")

    image_storage.delete("../keep.txt")

    assert outside.exists()
