"""Email Service 도메인 서비스 레이어입니다. jinja2 템플릿으로 본문을 만들고 SMTP로 발송합니다."""

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict

from jinja2 import Template

from app.config import settings

logger = logging.getLogger(__name__)

TEMPLATES: Dict[str, Dict[str, str]] = {
    "welcome": {
        "subject": "Welcome to Multimedia Portal!",
        "html": (
            "<h1>Welcome, {{ name }}!</h1>"
            "<p>Your account is ready. <a href=\"{{ login_url }}\">Sign in</a> to start exploring.</p>"
            "<p>&copy; {{ year }} Multimedia Portal</p>"
        ),
    },
    "comment_notification": {
        "subject": "New comment on \"{{ content_title }}\"",
        "html": (
            "<p>Hi {{ recipient_name }},</p>"
            "<p><strong>{{ commenter_name }}</strong> commented on "
            "<a href=\"{{ content_url }}\">{{ content_title }}</a>:</p>"
            "<blockquote>{{ comment_content }}</blockquote>"
        ),
    },
    "notification": {
        "subject": "{{ title }}",
        "html": "<p>Hi {{ name }},</p><p>{{ message }}</p>{% if link_url %}<p><a href=\"{{ link_url }}\">Open</a></p>{% endif %}",
    },
}


def render(template_name: str, context: Dict[str, Any]) -> Dict[str, str]:
    template = TEMPLATES[template_name]
    data = {"year": datetime.now().year, **context}
    return {
        "subject": Template(template["subject"]).render(**data),
        "html": Template(template["html"], autoescape=True).render(**data),
    }


def send_email(to: str, subject: str, html: str) -> bool:
    if not settings.MAIL_ENABLED:
        logger.info("[email] mail disabled; skipped '%s' to %s", subject, to)
        return True

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.MAIL_FROM
    msg["To"] = to
    msg.attach(MIMEText(html, "html", "utf-8"))

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USER and settings.SMTP_PASSWORD:
                smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            smtp.sendmail(settings.MAIL_FROM, [to], msg.as_string())
    except (smtplib.SMTPException, ConnectionError, TimeoutError, OSError) as exc:
        logger.error("[email] failed to send '%s' to %s: %s", subject, to, exc)
        return False

    logger.info("[email] sent '%s' to %s", subject, to)
    return True


def send_template(to: str, template_name: str, context: Dict[str, Any]) -> bool:
    rendered = render(template_name, context)
    return send_email(to, rendered["subject"], rendered["html"])
