# lessonhub/mailer.py
import smtplib
import logging
from email.message import EmailMessage

logger = logging.getLogger(__name__)


class Mailer:
    """SMTP 메일 발송"""

    def __init__(self, host, port, user, password):
        self.host = host
        self.port = port
        self.user = user
        self.password = password

    def build_message(self, to, subject, text=None, html=None):
        message = EmailMessage()
        message['From'] = self.user
        message['To'] = to
        message['Subject'] = subject
        message.set_content(text or '')
        if html:
            message.add_alternative(html, subtype='html')
        return message

    def send(self, to, subject, text=None, html=None):
        message = self.build_message(to, subject, text, html)
        try:
            with smtplib.SMTP_SSL(self.host, self.port) as smtp:
                smtp.login(self.user, self.password)
                smtp.send_message(message)
        except Exception as e:
            logger.error(f"메일 발송 실패 ({to}): {e}")
            raise
        logger.info(f"메일 발송 완료: {to} - {subject}")
