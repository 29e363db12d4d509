"""FastAPI routes for the Careers domain: vacancies, applications, messages and maintenance."""

import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from careers.api.schemas import (
    ApplicationResponse,
    ApplicationStatusResponse,
    ApplicationSubmittedResponse,
    BulkDeleteMessagesRequest,
    CheckStatusRequest,
    CleanupApplicationsRequest,
    DeletedCountResponse,
    MarkMessageRequest,
    MessageIdResponse,
    MessageResponse,
    PostVacancyRequest,
    ReviseVacancyRequest,
    StatusResponse,
    SubmitMessageRequest,
    UpdateApplicationStatusRequest,
    VacancyIdResponse,
    VacancyResponse,
)
from careers.application.application import Application, mask_email
from careers.application.cleanup import DeleteApplicationsOlderThan
from careers.application.review import UpdateApplicationStatus
from careers.application.submission import SubmitApplication, find_application_by_code
from careers.message.message import DeleteMessage, DeleteMessages, MarkMessage, Message, SubmitMessage
from careers.vacancy.vacancy import PostVacancy, RemoveVacancy, ReviseVacancy, Vacancy, VacancyStatus
from shared.auth import require_admin
from shared.storage import get_storage, stored_file_response
from shared.storage.port import CV_POLICY, read_upload

logger = structlog.get_logger(__name__)


def vacancy_response(vacancy: Vacancy) -> VacancyResponse:
    return VacancyResponse(
        id=str(vacancy.id),
        title=vacancy.title,
        description=vacancy.description,
        salary=vacancy.salary,
        shift=vacancy.shift,
        location=vacancy.location,
        status=vacancy.status,
        created_at=vacancy.created_at,
    )


def application_response(application: Application) -> ApplicationResponse:
    return ApplicationResponse(
        id=str(application.id),
        application_code=application.application_code,
        applicant_email=application.applicant_email,
        position_id=str(application.position_id) if application.position_id else None,
        position_title=application.position_title,
        full_name=application.full_name,
        age=application.age,
        gender=application.gender,
        date_of_birth=application.date_of_birth,
        country=application.country,
        city=application.city,
        address=application.address,
        can_work_9_to_5=application.can_work_9_to_5,
        years_experience=application.years_experience,
        reference_name=application.reference_name,
        reference_email=application.reference_email,
        reference_workplace=application.reference_workplace,
        interested_branch=application.interested_branch,
        can_work_legally=application.can_work_legally,
        cv_file_path=application.cv_file_path,
        cv_google_drive_link=application.cv_google_drive_link,
        status=application.status,
        created_at=application.created_at,
        updated_at=application.updated_at,
    )


def message_response(message: Message) -> MessageResponse:
    return MessageResponse(
        id=str(message.id),
        name=message.name,
        email=message.email,
        phone=message.phone,
        message=message.message,
        branch=message.branch,
        status=message.status,
        created_at=message.created_at,
    )


# ---------------------------------------------------------------------------
# Vacancy Router
# ---------------------------------------------------------------------------
vacancy_router = APIRouter(prefix="/vacancies", tags=["vacancies"])


@vacancy_router.get("", response_model=list[VacancyResponse])
async def list_vacancies() -> list[VacancyResponse]:
    vacancies = (
        current_domain.repository_for(Vacancy)
        ._dao.query.filter(status=VacancyStatus.ACTIVE.value)
        .order_by("-created_at")
        .all()
        .items
    )
    return [vacancy_response(v) for v in vacancies]


@vacancy_router.get("/{vacancy_id}", response_model=VacancyResponse)
async def get_vacancy(vacancy_id: str) -> VacancyResponse:
    return vacancy_response(current_domain.repository_for(Vacancy).get(vacancy_id))


@vacancy_router.post("", status_code=201, response_model=VacancyIdResponse)
async def post_vacancy(body: PostVacancyRequest, _admin: str = Depends(require_admin)) -> VacancyIdResponse:
    command = PostVacancy(
        title=body.title,
        description=body.description,
        salary=body.salary,
        shift=body.shift,
        location=body.location,
        status=body.status,
    )
    result = current_domain.process(command, asynchronous=False)
    return VacancyIdResponse(vacancy_id=result)


@vacancy_router.put("/{vacancy_id}", response_model=VacancyResponse)
async def revise_vacancy(
    vacancy_id: str, body: ReviseVacancyRequest, _admin: str = Depends(require_admin)
) -> VacancyResponse:
    command = ReviseVacancy(vacancy_id=vacancy_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return vacancy_response(current_domain.repository_for(Vacancy).get(vacancy_id))


@vacancy_router.delete("/{vacancy_id}", response_model=StatusResponse)
async def remove_vacancy(vacancy_id: str, _admin: str = Depends(require_admin)) -> StatusResponse:
    current_domain.process(RemoveVacancy(vacancy_id=vacancy_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Application Router (public)
# ---------------------------------------------------------------------------
application_router = APIRouter(prefix="/applications", tags=["applications"])


@application_router.post("", status_code=201, response_model=ApplicationSubmittedResponse)
async def submit_application(
    full_name: str | None = Form(default=None),
    date_of_birth: str | None = Form(default=None),
    city: str | None = Form(default=None),
    years_experience: str | None = Form(default=None),
    interested_branch: str | None = Form(default=None),
    applicant_email: str | None = Form(default=None),
    position_id: str | None = Form(default=None),
    position_title: str | None = Form(default=None),
    age: int | None = Form(default=None),
    gender: str | None = Form(default=None),
    country: str | None = Form(default=None),
    address: str | None = Form(default=None),
    can_work_9_to_5: bool = Form(default=False),
    reference_name: str | None = Form(default=None),
    reference_email: str | None = Form(default=None),
    reference_workplace: str | None = Form(default=None),
    can_work_legally: bool = Form(default=False),
    cv_google_drive_link: str | None = Form(default=None),
    cv_file: UploadFile | None = File(default=None),
) -> ApplicationSubmittedResponse:
    """Accept a job application with either an uploaded CV or a Google Drive link."""
    if not all([full_name, date_of_birth, city, years_experience, interested_branch, applicant_email]):
        raise ValidationError({"application": ["Required fields are missing"]})
    if cv_file is None and not cv_google_drive_link:
        raise ValidationError({"cv": ["CV file or Google Drive link is required"]})

    storage = get_storage()
    cv_path = None
    if cv_file is not None:
        content = await read_upload(CV_POLICY, cv_file)
        cv_path = storage.save("cvs", "cv", cv_file.filename, content)

    try:
        command = SubmitApplication(
            position_id=position_id if position_id and position_id != "manual" else None,
            position_title=position_title,
            full_name=full_name,
            age=age,
            gender=gender,
            date_of_birth=date_of_birth,
            country=country,
            city=city,
            address=address,
            can_work_9_to_5=can_work_9_to_5,
            years_experience=years_experience,
            reference_name=reference_name,
            reference_email=reference_email,
            reference_workplace=reference_workplace,
            interested_branch=interested_branch,
            can_work_legally=can_work_legally,
            cv_file_path=cv_path,
            cv_google_drive_link=cv_google_drive_link,
            applicant_email=applicant_email,
        )
        code = current_domain.process(command, asynchronous=False)
    except Exception:
        if cv_path:
            try:
                storage.delete(cv_path)
            except OSError as exc:
                logger.error("Failed to remove CV after rejected application", path=cv_path, error=str(exc))
        raise

    return ApplicationSubmittedResponse(application_code=code, applicant_email=applicant_email.strip().lower())


@application_router.post("/check-status", response_model=ApplicationStatusResponse)
async def check_application_status(body: CheckStatusRequest) -> ApplicationStatusResponse:
    application = find_application_by_code(body.application_code, body.email)
    return ApplicationStatusResponse(
        application_code=application.application_code,
        applicant_email=mask_email(application.applicant_email),
        full_name=application.full_name,
        position_title=application.position_title,
        status=application.status,
        created_at=application.created_at,
        updated_at=application.updated_at,
    )


# ---------------------------------------------------------------------------
# Application Router (admin)
# ---------------------------------------------------------------------------
admin_application_router = APIRouter(
    prefix="/admin/applications", tags=["applications"], dependencies=[Depends(require_admin)]
)


@admin_application_router.get("", response_model=list[ApplicationResponse])
async def list_applications() -> list[ApplicationResponse]:
    applications = current_domain.repository_for(Application)._dao.query.order_by("-created_at").all().items
    return [application_response(a) for a in applications]


@admin_application_router.get("/{application_id}/cv")
async def download_cv(application_id: str):
    """Serve an uploaded CV. Drive-link applications have no stored file."""
    application = current_domain.repository_for(Application).get(application_id)
    if not application.cv_file_path:
        raise ObjectNotFoundError("Application has no uploaded CV")
    return stored_file_response(application.cv_file_path)


@admin_application_router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str, body: UpdateApplicationStatusRequest
) -> ApplicationResponse:
    command = UpdateApplicationStatus(application_id=application_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return application_response(current_domain.repository_for(Application).get(application_id))


# ---------------------------------------------------------------------------
# Message Router
# ---------------------------------------------------------------------------
message_router = APIRouter(prefix="/messages", tags=["messages"])


@message_router.post("", status_code=201, response_model=MessageIdResponse)
async def submit_message(body: SubmitMessageRequest) -> MessageIdResponse:
    command = SubmitMessage(
        name=body.name,
        email=body.email,
        phone=body.phone,
        message=body.message,
        branch=body.branch,
    )
    result = current_domain.process(command, asynchronous=False)
    return MessageIdResponse(message_id=result)


@message_router.get("", response_model=list[MessageResponse])
async def list_messages(_admin: str = Depends(require_admin)) -> list[MessageResponse]:
    messages = current_domain.repository_for(Message)._dao.query.order_by("-created_at").all().items
    return [message_response(m) for m in messages]


@message_router.delete("/bulk", response_model=DeletedCountResponse)
async def delete_messages(
    body: BulkDeleteMessagesRequest, _admin: str = Depends(require_admin)
) -> DeletedCountResponse:
    deleted = current_domain.process(DeleteMessages(message_ids=body.ids), asynchronous=False)
    return DeletedCountResponse(deleted=deleted)


@message_router.put("/{message_id}", response_model=MessageResponse)
async def mark_message(
    message_id: str, body: MarkMessageRequest, _admin: str = Depends(require_admin)
) -> MessageResponse:
    current_domain.process(MarkMessage(message_id=message_id, status=body.status), asynchronous=False)
    return message_response(current_domain.repository_for(Message).get(message_id))


@message_router.delete("/{message_id}", response_model=StatusResponse)
async def delete_message(message_id: str, _admin: str = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeleteMessage(message_id=message_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Maintenance Router
# ---------------------------------------------------------------------------
maintenance_router = APIRouter(prefix="/maintenance", tags=["maintenance"], dependencies=[Depends(require_admin)])


@maintenance_router.post("/applications/cleanup", response_model=DeletedCountResponse)
async def cleanup_applications(body: CleanupApplicationsRequest) -> DeletedCountResponse:
    """Delete applications left in a status longer than ``age_days``. Safe to repeat."""
    deleted = current_domain.process(
        DeleteApplicationsOlderThan(status=body.status, age_days=body.age_days),
        asynchronous=False,
    )
    return DeletedCountResponse(deleted=deleted)

