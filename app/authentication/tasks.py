"""
Celery tasks for authentication.

- send_magic_link_email: deliver a magic-link login email
- cleanup_expired_login_tokens: periodic purge of used / long-expired tokens
  (scheduled by migration 0002_login_token_cleanup_schedule)

Usage:
    from authentication.tasks import send_magic_link_email
    send_magic_link_email.delay(login_token_id=42)
"""

import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.db.models import Q
from django.utils import timezone

logger = logging.getLogger(__name__)

# Expired tokens are kept this long for auditing before deletion
EXPIRED_TOKEN_RETENTION = timedelta(days=1)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_magic_link_email(self, login_token_id: int) -> bool:
    """
    Send the login link for a LoginToken.

    Returns:
        True if the email was sent, False if the token is gone or already unusable
    """
    from authentication.models import LoginToken
    from authentication.services import AuthService

    try:
        login_token = LoginToken.objects.select_related("user").get(id=login_token_id)
    except LoginToken.DoesNotExist:
        logger.error(f"LoginToken {login_token_id} not found for magic link email")
        return False

    if not login_token.is_valid:
        logger.info(f"LoginToken {login_token_id} no longer valid, email not sent")
        return False

    user = login_token.user
    url = AuthService.build_login_url(login_token.token)
    minutes = settings.MAGIC_LINK_EXPIRY_MINUTES

    send_mail(
        subject="Your sign-in link",
        message=(
            f"Hi {user.username},\n\n"
            f"Use this link to sign in. It expires in {minutes} minutes "
            f"and can be used once:\n\n{url}\n"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
    )
    logger.info(f"Magic link email sent to user {user.id}")
    return True


@shared_task
def cleanup_expired_login_tokens() -> int:
    """
    Delete used tokens and tokens expired for more than a day.

    Returns:
        Number of tokens deleted
    """
    from authentication.models import LoginToken

    cutoff = timezone.now() - EXPIRED_TOKEN_RETENTION
    deleted, _ = LoginToken.objects.filter(
        Q(used_at__isnull=False) | Q(expires_at__lt=cutoff)
    ).delete()

    logger.info(f"Cleaned up {deleted} login tokens")
    return deleted
