"""
Shared field validators for the portal's people, companies and bank accounts.

South African formats: 13 digit ID numbers, 4 digit postal codes, 10 digit
bank account numbers and 6 digit universal branch codes.
"""

import re

from django.core.validators import RegexValidator

phone_number_validator = RegexValidator(
    regex=r'^\+?[1-9]\d{1,14}$',
    message='Enter a valid phone number (e.g. +27821234567).',
)

id_number_validator = RegexValidator(
    regex=r'^\d{13}$',
    message='ID number must be exactly 13 digits.',
)

postal_code_validator = RegexValidator(
    regex=r'^\d{4}$',
    message='Postal code must be exactly 4 digits.',
)

website_validator = RegexValidator(
    regex=r'^(https?://)?([\w\-]+\.)+[\w\-]+(/[\w\-]*)*/?$',
    message='Enter a valid website address.',
)

bank_account_number_validator = RegexValidator(
    regex=r'^\d{10}$',
    message='Bank account number must be exactly 10 digits.',
)

bank_branch_code_validator = RegexValidator(
    regex=r'^\d{6}$',
    message='Branch code must be exactly 6 digits.',
)


def normalize_phone_number(value):
    """
    Strip spaces, dashes and brackets from a phone number.

    A local number with a leading zero (0821234567) becomes +27821234567.
    Empty values are returned unchanged.
    """
    if not value:
        return value

    cleaned = re.sub(r'[\s\-()]', '', value)
    if cleaned.startswith('00'):
        cleaned = '+' + cleaned[2:]
    elif cleaned.startswith('0'):
        cleaned = '+27' + cleaned[1:]
    return cleaned
