"""
Email notices for the marketplace.

In dev mode messages are only logged; in prod mode they go out through
SendGrid. Sending never raises: a failed notice is logged and reported
as False to the caller.
"""
import logging
from smartmatch.config import settings

logger = logging.getLogger(__name__)

LAYOUT = """
<html>
    <body style="font-family: Arial, sans-serif; background-color: #f4f4f4; padding: 20px;">
        <div style="max-width: 600px; margin: 0 auto; background-color: white; padding: 40px; border-radius: 8px;">
            <h2 style="color: #333; margin-bottom: 20px;">{heading}</h2>
            <p style="color: #666; font-size: 16px; line-height: 1.6;">{body}</p>
            {action}
        </div>
    </body>
</html>
"""

ACTION_BUTTON = (
    '<p style="margin: 30px 0;"><a href="{url}" style="background-color: #007bff; color: white; '
    'padding: 12px 30px; text-decoration: none; border-radius: 5px;">{label}</a></p>'
)


def render_notice(heading: str, body_html: str, action_url: str = None, action_label: str = None) -> str:
    action = ACTION_BUTTON.format(url=action_url, label=action_label) if action_url else ""
    return LAYOUT.format(heading=heading, body=body_html, action=action)


class EmailService:
    """Sends marketplace notices in dev (log only) or prod (SendGrid) mode."""

    def __init__(self):
        self.mode = settings.email_mode
        self.sendgrid_client = None
        if self.mode == "prod":
            from sendgrid import SendGridAPIClient
            self.sendgrid_client = SendGridAPIClient(settings.sendgrid_api_key)

    async def send_application_received(self, email: str, job_title: str, candidate_name: str) -> bool:
        """Tell the HR owner a candidate applied to their job."""
        review_url = f"{settings.get_frontend_url()}/hr"
        html_content = render_notice(
            "New application",
            f"<strong>{candidate_name}</strong> applied to <strong>{job_title}</strong>.",
            review_url,
            "Review applications",
        )
        text_content = f"{candidate_name} applied to {job_title}.\nReview it at {review_url}"
        return await self._send_email(email, f"New application: {job_title}", text_content, html_content)

    async def send_application_status_changed(self, email: str, title: str, status: str) -> bool:
        """Tell a candidate the status of their job or internship application changed."""
        readable_status = status.replace("_", " ").lower()
        html_content = render_notice(
            "Application update",
            f"Your application for <strong>{title}</strong> is now <strong>{readable_status}</strong>.",
        )
        text_content = f"Your application for {title} is now {readable_status}."
        return await self._send_email(email, f"Application update: {title}", text_content, html_content)

    async def send_company_selected(self, email: str, specialty: str, university_name: str) -> bool:
        """Tell an HR user their response to an internship request was accepted."""
        html_content = render_notice(
            "Your response was accepted",
            f"<strong>{university_name}</strong> selected your company to host <strong>{specialty}</strong> interns.",
        )
        text_content = f"{university_name} selected your company to host {specialty} interns."
        return await self._send_email(
            email, f"{university_name} selected your company", text_content, html_content
        )

    async def _send_email(self, to_email: str, subject: str, text_content: str, html_content: str) -> bool:
        if self.mode == "dev":
            logger.info(f"[DEV MODE] Email to {to_email}: {subject}")
            logger.debug(f"[DEV MODE] Content:\n{text_content}")
            return True

        try:
            from sendgrid.helpers.mail import Mail, Email, To, Content

            mail = Mail(
                from_email=Email(settings.email_from, "SmartMatch"),
                to_emails=To(to_email),
                subject=subject,
                plain_text_content=Content("text/plain", text_content),
                html_content=Content("text/html", html_content)
            )
            response = self.sendgrid_client.send(mail)
        except Exception as e:
            logger.error(f"Error sending email to {to_email}: {str(e)}", exc_info=True)
            return False

        if 200 <= response.status_code < 300:
            logger.info(f"Email sent to {to_email}: {subject}")
            return True
        logger.error(f"Failed to send email to {to_email}: {response.status_code}")
        return False


email_service = EmailService()
