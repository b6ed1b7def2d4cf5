import logging
from functools import lru_cache
from typing import List

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig

from config import (
    EMAIL_FROM,
    EMAIL_FROM_NAME,
    EMAIL_PASSWORD,
    EMAIL_PORT,
    EMAIL_SERVER,
    EMAIL_STARTTLS,
    EMAIL_SUPPRESS_SEND,
    EMAIL_USERNAME,
    LOGIN_URL,
)
from utils.exceptions import DependencyFailure

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        try:
            self.config = ConnectionConfig(
                MAIL_USERNAME=EMAIL_USERNAME,
                MAIL_PASSWORD=EMAIL_PASSWORD,
                MAIL_FROM=EMAIL_FROM,
                MAIL_PORT=EMAIL_PORT,
                MAIL_SERVER=EMAIL_SERVER,
                MAIL_FROM_NAME=EMAIL_FROM_NAME,
                MAIL_STARTTLS=EMAIL_STARTTLS,
                MAIL_SSL_TLS=False,
                USE_CREDENTIALS=bool(EMAIL_USERNAME),
                VALIDATE_CERTS=False,
                SUPPRESS_SEND=1 if EMAIL_SUPPRESS_SEND else 0,
            )
            self.mailer = FastMail(self.config)
        except Exception as e:
            raise Exception(f"Failed to initialize email service: {str(e)}")

    async def send_email(self, to_email: str, subject: str, body: str, subtype: str = "plain"):
        """Send one message; any delivery problem surfaces as DependencyFailure."""
        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=body,
            subtype=subtype,
        )
        try:
            await self.mailer.send_message(message)
        except Exception as e:
            logger.error("Email delivery failed: %s", subject)
            raise DependencyFailure(f"Failed to send email to {to_email}: {e}")

    async def send_invitation_email(self, email: str, role: str):
        await self.send_email(
            email,
            f"Invitation to Join as {role}",
            f"""Hello,

You have been added as a {role} in the system. Please login at: {LOGIN_URL}

Thank You.""",
        )

    async def send_vendor_assignment_email(
        self, email: str, agent_name: str, address: str, service_types: List[str]
    ):
        await self.send_email(
            email,
            "New Service Request Assigned",
            f"""Hello,

Agent {agent_name} has assigned you a service request for: {", ".join(service_types)} at {address}.
Please check your dashboard for details.

Thank You.""",
        )

    async def send_vendor_cancellation_email(
        self, email: str, agent_name: str, address: str, service_types: List[str]
    ):
        await self.send_email(
            email,
            "Service Request Cancellation",
            f"""Hello,

Agent {agent_name} has cancelled your service request for: {", ".join(service_types)} at {address}.
Please check your dashboard for details.

Thank You.""",
        )

    async def send_otp_email(self, email: str, otp: str):
        await self.send_email(
            email,
            "Your OTP Code for Login",
            f"""<h2>Login OTP Code</h2>
<p>Your One-Time Password (OTP) is:</p>
<h1><strong>{otp}</strong></h1>
<p>Please enter this code to verify your login.</p>
<br/>
<p>Regards,<br/><strong>{EMAIL_FROM_NAME}</strong></p>""",
            subtype="html",
        )


@lru_cache
def get_email_service() -> EmailService:
    return EmailService()
