from pashumitra.integrations.email.senders.resend_sender import ResendEmailSender
from pashumitra.integrations.email.senders.ses_sender import SESEmailSender

__all__ = ["ResendEmailSender", "SESEmailSender"]
