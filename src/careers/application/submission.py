"""Application submission and the public status lookup."""

from datetime import UTC, date, datetime

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from careers.application.application import Application, generate_application_code
from careers.domain import careers

logger = structlog.get_logger(__name__)


@careers.command(part_of="Application")
class SubmitApplication:
    position_id = Identifier()
    position_title = String(max_length=200)
    full_name = String(required=True, max_length=100)
    age = Integer()
    gender = String(max_length=10)
    date_of_birth = String(required=True, max_length=10)
    country = String(max_length=100)
    city = String(required=True, max_length=100)
    address = Text()
    can_work_9_to_5 = Boolean(default=False)
    years_experience = String(required=True, max_length=5)
    reference_name = String(max_length=100)
    reference_email = String(max_length=254)
    reference_workplace = String(max_length=200)
    interested_branch = String(required=True, max_length=100)
    can_work_legally = Boolean(default=False)
    cv_file_path = String(max_length=500)
    cv_google_drive_link = String(max_length=500)
    applicant_email = String(required=True, max_length=254)


def _unique_code(repo):
    while True:
        code = generate_application_code()
        if not repo._dao.query.filter(application_code=code).all().items:
            return code


@careers.command_handler(part_of=Application)
class SubmitApplicationHandler:
    @handle(SubmitApplication)
    def submit_application(self, command):
        """Store the application and return its public code."""
        try:
            dob = date.fromisoformat(command.date_of_birth)
        except ValueError:
            raise ValidationError({"date_of_birth": ["Date of birth must be an ISO date (YYYY-MM-DD)"]}) from None

        repo = current_domain.repository_for(Application)
        now = datetime.now(UTC)
        application = Application(
            position_id=command.position_id or None,
            position_title=(command.position_title or "").strip() or "General Application",
            full_name=command.full_name.strip(),
            age=command.age,
            gender=command.gender or "male",
            date_of_birth=dob,
            country=command.country or "Sri Lanka",
            city=command.city,
            address=command.address or "",
            can_work_9_to_5=bool(command.can_work_9_to_5),
            years_experience=command.years_experience,
            reference_name=command.reference_name,
            reference_email=command.reference_email,
            reference_workplace=command.reference_workplace,
            interested_branch=command.interested_branch,
            can_work_legally=bool(command.can_work_legally),
            cv_file_path=command.cv_file_path,
            cv_google_drive_link=command.cv_google_drive_link,
            application_code=_unique_code(repo),
            applicant_email=command.applicant_email.strip().lower(),
            created_at=now,
            updated_at=now,
        )
        repo.add(application)
        logger.info(
            "Application submitted",
            application_id=str(application.id),
            application_code=application.application_code,
            position_title=application.position_title,
        )
        return application.application_code


def find_application_by_code(application_code, email):
    """Look up an application by its public code and the applicant's email."""
    matches = (
        current_domain.repository_for(Application)
        ._dao.query.filter(
            application_code=application_code.strip().upper(),
            applicant_email=email.strip().lower(),
        )
        .all()
        .items
    )
    if not matches:
        raise ObjectNotFoundError("Application not found. Please check your code and email.")
    return matches[0]
