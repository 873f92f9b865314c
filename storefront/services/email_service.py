"""Service for sending account emails."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)


class EmailService:
    """Sends verification and password reset emails via SMTP."""

    def __init__(
        self,
        public_base_url: str,
        frontend_base_url: str,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "Storefront",
        verification_hours: int = 24,
        reset_minutes: int = 60,
    ):
        self.public_base_url = public_base_url.rstrip("/")
        self.frontend_base_url = frontend_base_url.rstrip("/")
        self.smtp_host = smtp_host or ""
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username or ""
        self.smtp_password = smtp_password or ""
        self.from_email = from_email or ""
        self.from_name = from_name
        self.verification_hours = verification_hours
        self.reset_minutes = reset_minutes
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def verification_url(self, verification_token: str) -> str:
        return f"{self.public_base_url}/api/v1/verify/user/{verification_token}"

    def reset_url(self, reset_token: str) -> str:
        return f"{self.frontend_base_url}/reset/password/{reset_token}"

    def send_verification_email(self, to_email: str, username: str, verification_token: str) -> bool:
        """
        Send the account verification email.

        Args:
            to_email: Recipient email
            username: Recipient username, used in the greeting
            verification_token: Verification token

        Returns:
            True if sent (or logged in development), False otherwise
        """
        verification_url = self.verification_url(verification_token)
        if not self.enabled:
            # Development mode: no SMTP, expose the link in the logs instead
            logger.info("SMTP disabled, verification email for %s not sent", to_email)
            logger.debug("Verification URL for %s: %s", to_email, verification_url)
            return True

        subject = "Verify your email - Storefront"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #1e293b;">Welcome to Storefront, {username}!</h2>
                <p style="color: #475569; line-height: 1.6;">
                    Thanks for signing up. Please confirm your email address to activate your account:
                </p>
                <div style="text-align: center; margin: 30px 0;">
                    <a href="{verification_url}"
                       style="background-color: #3b82f6; color: white; padding: 15px 30px;
                              text-decoration: none; border-radius: 5px; font-weight: bold;">
                        Verify email
                    </a>
                </div>
                <p style="color: #64748b; font-size: 14px;">
                    This link expires in {self.verification_hours} hours.
                    If you did not create an account, you can ignore this email.
                </p>
            </body>
        </html>
        """

        text_body = f"""
        Welcome to Storefront, {username}!

        Confirm your email address by opening the link below:
        {verification_url}

        This link expires in {self.verification_hours} hours.
        """

        return self._send_email(to_email, subject, html_body, text_body)

    def send_password_reset_email(self, to_email: str, username: str, reset_token: str) -> bool:
        """Send the password reset link. Same return contract as ``send_verification_email``."""
        reset_url = self.reset_url(reset_token)
        if not self.enabled:
            logger.info("SMTP disabled, password reset email for %s not sent", to_email)
            logger.debug("Password reset URL for %s: %s", to_email, reset_url)
            return True

        subject = "Reset your password - Storefront"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #1e293b;">Hello {username},</h2>
                <p style="color: #475569; line-height: 1.6;">
                    We received a request to reset your password. Use the button below to choose a new one:
                </p>
                <div style="text-align: center; margin: 30px 0;">
                    <a href="{reset_url}"
                       style="background-color: #3b82f6; color: white; padding: 15px 30px;
                              text-decoration: none; border-radius: 5px; font-weight: bold;">
                        Reset password
                    </a>
                </div>
                <p style="color: #64748b; font-size: 14px;">
                    This link expires in {self.reset_minutes} minutes and can be used once.
                    If you did not request a reset, you can ignore this email.
                </p>
            </body>
        </html>
        """

        text_body = f"""
        Hello {username},

        Reset your password by opening the link below:
        {reset_url}

        This link expires in {self.reset_minutes} minutes and can be used once.
        """

        return self._send_email(to_email, subject, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            msg.attach(MIMEText(text_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            return True

        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send email to %s", to_email)
            return False
