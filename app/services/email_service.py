import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from app.core.config import settings

logger = logging.getLogger(__name__)

SERVICE_LABELS = {
    "basic": "Basic Grooming (60 minutes)",
    "full": "Full Grooming (120 minutes)",
}


def _send_email_sync(to_email: str, subject: str, html_body: str) -> None:
    """Send email via SMTP (blocking). Use from background task."""
    if not settings.email_enabled:
        logger.debug("Email disabled (SMTP not configured), skipping send")
        return
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.from_name} <{settings.from_email}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.from_email, [to_email], msg.as_string())
        logger.info("Email sent to %s", to_email)
    except Exception as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)


def booking_reference(appointment_id: int, created_at: datetime) -> str:
    return f"FK-{created_at:%y%m%d}-{appointment_id:05d}"


def build_booking_confirmation_html(
    recipient_name: str,
    reference: str,
    pet_name: str,
    groomer_name: str,
    service_type: str,
    start_time: datetime,
    end_time: datetime,
    is_rescheduled: bool = False,
) -> str:
    heading = "Appointment Rescheduled" if is_rescheduled else "Appointment Confirmed"
    intro = (
        "your grooming appointment has been moved to a new time."
        if is_rescheduled
        else "your grooming appointment is booked."
    )
    date_str = start_time.strftime("%A, %d %B %Y")
    time_str = f"{start_time:%H:%M} - {end_time:%H:%M} (UTC)"
    service_label = SERVICE_LABELS.get(service_type, service_type)
    return f"""
<div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto;">
  <h2 style="color:#333;">{heading}</h2>
  <p>Hello {escape(recipient_name or 'there')}, {intro}</p>
  <table style="width:100%;background:#f9fafb;border-radius:8px;padding:16px;">
    <tr><td><strong>Booking reference</strong></td><td>{reference}</td></tr>
    <tr><td><strong>Pet</strong></td><td>{escape(pet_name)}</td></tr>
    <tr><td><strong>Groomer</strong></td><td>{escape(groomer_name)}</td></tr>
    <tr><td><strong>Service</strong></td><td>{escape(service_label)}</td></tr>
    <tr><td><strong>Date</strong></td><td>{date_str}</td></tr>
    <tr><td><strong>Time</strong></td><td>{time_str}</td></tr>
  </table>
  <p>Changes and cancellations are possible up to {settings.modification_window_hours} hours before the start time.</p>
  <hr style="margin:30px 0;border:none;border-top:1px solid #eee;">
  <p style="color:#666;font-size:12px;">This is an automated email from {settings.site_name}. Please do not reply to this email.</p>
</div>
"""


def send_booking_confirmation_email(
    to_email: str,
    recipient_name: str | None,
    appointment_id: int,
    created_at: datetime,
    pet_name: str,
    groomer_name: str,
    service_type: str,
    start_time: datetime,
    end_time: datetime,
    is_rescheduled: bool = False,
) -> None:
    """Compose and send booking confirmation (call from background task)."""
    action = "Rescheduled" if is_rescheduled else "Confirmed"
    subject = f"{settings.site_name} - Appointment {action}"
    html = build_booking_confirmation_html(
        recipient_name=recipient_name or "",
        reference=booking_reference(appointment_id, created_at),
        pet_name=pet_name,
        groomer_name=groomer_name,
        service_type=service_type,
        start_time=start_time,
        end_time=end_time,
        is_rescheduled=is_rescheduled,
    )
    _send_email_sync(to_email, subject, html)
