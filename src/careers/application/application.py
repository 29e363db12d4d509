"""Job application aggregate.

Applicants track their application with a public code and the email they
applied with; the code is unique across all applications.
"""

import re
import secrets
import string
import time
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, Identifier, Integer, String, Text

from careers.domain import careers
from shared.email import is_valid_email

_BASE36 = string.digits + string.ascii_uppercase


class ApplicationStatus(Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    HIRED = "hired"


class ApplicantGender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class YearsExperience(Enum):
    UNDER_ONE = "0-1"
    ONE_TO_THREE = "1-3"
    THREE_TO_FIVE = "3-5"
    FIVE_TO_TEN = "5-10"
    OVER_TEN = "10+"


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_application_code() -> str:
    """``HT-<base36 milliseconds>-<6 random base36 characters>``"""
    timestamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"HT-{timestamp}-{suffix}"


def mask_email(email: str) -> str:
    """Keep the first two characters of the local part and the domain: ``jo***@example.com``"""
    return re.sub(r"(.{2}).+(@.*)", r"\1***\2", email)


@careers.aggregate
class Application:
    position_id = Identifier()
    position_title = String(max_length=200, default="General Application")
    full_name = String(required=True, max_length=100)
    age = Integer(min_value=18, max_value=100)
    gender = String(choices=ApplicantGender, default=ApplicantGender.MALE.value)
    date_of_birth = Date(required=True)
    country = String(max_length=100, default="Sri Lanka")
    city = String(required=True, max_length=100)
    address = Text()
    can_work_9_to_5 = Boolean(default=False)
    years_experience = String(choices=YearsExperience, required=True)
    reference_name = String(max_length=100)
    reference_email = String(max_length=254)
    reference_workplace = String(max_length=200)
    interested_branch = String(required=True, max_length=100)
    can_work_legally = Boolean(default=False)
    cv_file_path = String(max_length=500)
    cv_google_drive_link = String(max_length=500)
    application_code = String(required=True, max_length=40)
    applicant_email = String(required=True, max_length=254)
    status = String(choices=ApplicationStatus, default=ApplicationStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def applicant_email_must_be_valid(self):
        if not is_valid_email(self.applicant_email or ""):
            raise ValidationError({"applicant_email": ["Please provide a valid email address"]})

    @invariant.post
    def cv_must_be_provided(self):
        if not self.cv_file_path and not self.cv_google_drive_link:
            raise ValidationError({"cv": ["CV file or Google Drive link is required"]})

    def change_status(self, status):
        if status not in {s.value for s in ApplicationStatus}:
            raise ValidationError({"status": ["Invalid status"]})
        self.status = status
        self.updated_at = datetime.now(UTC)
