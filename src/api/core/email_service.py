import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from html import escape
from typing import Optional

from src.config import (
    CONTACT_EMAIL,
    SMTP_EMAIL,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
)

logger = logging.getLogger(__name__)


def _send(message: MIMEMultipart) -> bool:
    if not SMTP_EMAIL or not SMTP_PASSWORD:
        raise ValueError("SMTP_EMAIL and SMTP_PASSWORD environment variables must be set")

    try:
        # Create SMTP session
        with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=10) as server:
            server.starttls()  # Enable TLS encryption
            server.login(SMTP_EMAIL, SMTP_PASSWORD)
            server.send_message(message)

        logger.info("Email '%s' sent to %s", message["Subject"], message["To"])
        return True

    except smtplib.SMTPAuthenticationError:
        logger.error("SMTP Authentication failed. Check your email and app password.")
        raise
    except (smtplib.SMTPException, OSError) as e:
        logger.error("SMTP error occurred: %s", e)
        raise


def send_password_reset_email(recipient_email: str, reset_url: str, user_name: Optional[str] = None) -> bool:
    """
    Send the password reset link

    Args:
        recipient_email: The recipient's email address
        reset_url: Frontend URL carrying the reset token
        user_name: Optional user name for personalization
    """
    greeting = f"Hello {user_name}," if user_name else "Hello,"

    message = MIMEMultipart("alternative")
    message["Subject"] = "Reset your password"
    message["From"] = SMTP_EMAIL or ""
    message["To"] = recipient_email

    text = f"""
    {greeting}

    We received a request to reset your password. Open the link below to choose a new one:

    {reset_url}

    This link will expire in 10 minutes.

    If you didn't request a password reset, please ignore this email.
    """

    html = f"""
    <html>
      <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
          <h2 style="color: #111;">Password Reset Request</h2>
          <p>{escape(greeting)}</p>
          <p>We received a request to reset your password. Click the button below to choose a new one:</p>
          <div style="text-align: center; margin: 30px 0;">
            <a href="{escape(reset_url)}" style="background-color: #111; color: #fff; padding: 12px 24px; text-decoration: none; border-radius: 4px;">Reset password</a>
          </div>
          <p style="color: #666; font-size: 14px;">This link will expire in <strong>10 minutes</strong>.</p>
          <p style="color: #999; font-size: 12px; margin-top: 30px;">
            If you didn't request a password reset, please ignore this email.
          </p>
        </div>
      </body>
    </html>
    """

    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))

    return _send(message)


def send_contact_email(name: str, email: str, subject: str, body: str, phone: Optional[str] = None) -> bool:
    """Forward a contact form submission to the store inbox"""
    message = MIMEMultipart("alternative")
    message["Subject"] = f"[Contact] {subject}"
    message["From"] = SMTP_EMAIL or ""
    message["To"] = CONTACT_EMAIL or SMTP_EMAIL or ""
    message["Reply-To"] = email

    text = f"""
    Name: {name}
    Email: {email}
    Phone: {phone or '-'}

    {body}
    """

    html = f"""
    <html>
      <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <h3>New contact message</h3>
        <p><strong>Name:</strong> {escape(name)}</p>
        <p><strong>Email:</strong> {escape(email)}</p>
        <p><strong>Phone:</strong> {escape(phone or '-')}</p>
        <p style="white-space: pre-line;">{escape(body)}</p>
      </body>
    </html>
    """

    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))

    return _send(message)
