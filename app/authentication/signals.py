"""
Django signals for authentication.

- Refresh a Google user's avatar whenever their social account is updated
- Log sign-ins

Related files:
    - adapters.py: first-login population of username / avatar
    - apps.py: Signal import in ready()
"""

import logging

from allauth.socialaccount.signals import social_account_updated
from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(social_account_updated)
def sync_avatar_from_social(sender, request, sociallogin, **kwargs):
    """
    Copy the latest Google picture onto the user.

    allauth refreshes SocialAccount.extra_data on every login of an existing
    account and then sends social_account_updated.
    """
    user = sociallogin.user
    picture = sociallogin.account.extra_data.get("picture", "")
    if picture and picture != user.avatar_url:
        user.avatar_url = picture
        user.save(update_fields=["avatar_url", "updated_at"])
        logger.debug(f"Avatar refreshed from {sociallogin.account.provider} for user {user.id}")


@receiver(user_logged_in)
def log_user_login(sender, request, user, **kwargs):
    logger.info(f"User {user.id} signed in")
