"""Referral-to-opening matching engine for provider placement."""

from referral_match.utils.constants import APP_NAME, VERSION

__app_name__ = APP_NAME
__version__ = VERSION
