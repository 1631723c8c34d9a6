"""
Field rules for department drafts.

- Department name: required, no ASCII digits (stripped on input)
- Department code: required
"""

import re
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

DIGITS_RE = re.compile(r'[0-9]')

NAME_REQUIRED_MESSAGE = _('Department name is required.')
NAME_HAS_DIGITS_MESSAGE = _('Department name must not contain digits.')
CODE_REQUIRED_MESSAGE = _('Department code is required.')


def strip_digits(value):
    """Remove every ASCII digit from value. Applying it twice changes nothing."""
    return DIGITS_RE.sub('', value or '')


def validate_not_blank(value, message):
    if not (value or '').strip():
        raise ValidationError(message, code='required')


def validate_no_digits(value):
    if DIGITS_RE.search(value or ''):
        raise ValidationError(NAME_HAS_DIGITS_MESSAGE, code='digits')
