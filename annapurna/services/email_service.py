'''
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Thu Aug 07 2025
# SPDX-License-Identifier: MIT
'''

from html import escape

import structlog
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from annapurna.config import settings
from annapurna.db import models

logger = structlog.get_logger(__name__)


class EmailService:
    def __init__(self):
        self.sg = SendGridAPIClient(settings.sendgrid_api_key)
        self.sender_email = settings.mail_sender_email
        self.sender_name = settings.mail_sender_name

    @staticmethod
    def is_configured() -> bool:
        return bool(settings.sendgrid_api_key)

    def send_notification_email(self, user: models.User, notification: models.Notification) -> bool:
        """
        Sends an email copy of an in-app notification.
        """
        greeting = escape(user.first_name or user.organization_name or "there")
        title = escape(notification.title)
        description = escape(notification.description or "")
        action_url = escape(notification.action_url or "")
        html_content = f"""
        <html>
        <body>
            <p>Hi {greeting},</p>
            <h3>{title}</h3>
            <p>{description}</p>
            <p>You can follow this donation from your Annapurna dashboard: {action_url}</p>
            <p>Thank you for helping reduce food waste!</p>
            <p>Best regards,</p>
            <p>{self.sender_name}</p>
        </body>
        </html>
        """
        return self._send_email(user.email, notification.title, html_content)

    def _send_email(self, to_email: str, subject: str, html_content: str) -> bool:
        """
        Internal helper to send an email using SendGrid. Failures are logged, never raised.
        """
        message = Mail(
            from_email=(self.sender_email, self.sender_name),
            to_emails=to_email,
            subject=subject,
            html_content=html_content,
        )
        try:
            response = self.sg.send(message)
            logger.info("Email sent", to_email=to_email, status_code=response.status_code)
            return 200 <= response.status_code < 300
        except Exception as e:
            logger.error("Email sending failed", to_email=to_email, error=str(e))
            return False
