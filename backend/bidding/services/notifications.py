# backend/bidding/services/notifications.py
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from ..config import settings
from ..utils.logging import service_logger

SIGNATURE = "Best regards,\nBidding System Team"


@dataclass(frozen=True)
class Notification:
    to: str
    subject: str
    text: str


class NotificationError(Exception):
    pass


class NotificationService:
    """Sends plain-text transactional email over SMTP"""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def _build_message(self, notification: Notification) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = notification.subject
        message["From"] = f'"{settings.EMAIL_FROM_NAME}" <{settings.EMAIL_USER}>'
        message["To"] = notification.to
        message.set_content(notification.text)
        return message

    def send(self, notification: Notification) -> None:
        """Deliver a message; raises NotificationError on transport failure"""
        if not settings.email_configured:
            service_logger.info("Email transport not configured, skipping send", extra={
                "to": notification.to,
                "subject": notification.subject
            })
            return

        try:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=self.timeout) as smtp:
                smtp.starttls()
                smtp.login(settings.EMAIL_USER, settings.EMAIL_PASS)
                smtp.send_message(self._build_message(notification))
        except (smtplib.SMTPException, OSError) as e:
            service_logger.error("Failed to send email", extra={
                "to": notification.to,
                "subject": notification.subject,
                "error": str(e)
            })
            raise NotificationError("Failed to send email") from e

        service_logger.info(f"Email sent to {notification.to}")

    def notify(self, notification: Notification) -> bool:
        """Best-effort send: failures are logged and reported as False"""
        try:
            self.send(notification)
            return True
        except NotificationError:
            return False

    def notify_all(self, notifications: list[Notification]) -> None:
        for notification in notifications:
            self.notify(notification)


def bid_selected_notification(project, bid, buyer) -> Notification:
    return Notification(
        to=bid.seller.email,
        subject=f"You've been selected for the project: {project.title}",
        text=(
            f"Dear {bid.seller.name},\n\n"
            f"Congratulations! Your bid of ${bid.amount:g} has been selected for the project "
            f"\"{project.title}\" by {buyer.name} ({buyer.email}).\n\n"
            "Please get in touch with the buyer to proceed.\n\n"
            f"{SIGNATURE}"
        )
    )


def project_completed_notifications(project, seller, buyer) -> list[Notification]:
    subject = f"Project Completed: {project.title}"
    return [
        Notification(
            to=seller.email,
            subject=subject,
            text=(
                f"Dear {seller.name},\n\n"
                f"The project \"{project.title}\" has been marked as completed by {buyer.name} ({buyer.email}).\n\n"
                "Thank you for your work!\n\n"
                f"{SIGNATURE}"
            )
        ),
        Notification(
            to=buyer.email,
            subject=subject,
            text=(
                f"Dear {buyer.name},\n\n"
                f"You have successfully marked the project \"{project.title}\" as completed.\n\n"
                "Thank you for using our platform!\n\n"
                f"{SIGNATURE}"
            )
        ),
    ]


notification_service = NotificationService()


def get_notifier() -> NotificationService:
    return notification_service
