"""Pydantic request/response schemas for the Careers API."""

from datetime import date, datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PostVacancyRequest(BaseModel):
    title: str = Field(max_length=100)
    description: str
    salary: str
    shift: str
    location: str | None = None
    status: str | None = None


class ReviseVacancyRequest(BaseModel):
    title: str | None = Field(default=None, max_length=100)
    description: str | None = None
    salary: str | None = None
    shift: str | None = None
    location: str | None = None
    status: str | None = None


class CheckStatusRequest(BaseModel):
    application_code: str
    email: str


class UpdateApplicationStatusRequest(BaseModel):
    status: str


class CleanupApplicationsRequest(BaseModel):
    status: str = "rejected"
    age_days: int = Field(default=30, ge=0)


class SubmitMessageRequest(BaseModel):
    name: str
    email: str
    phone: str | None = None
    message: str
    branch: str


class MarkMessageRequest(BaseModel):
    status: str = "read"


class BulkDeleteMessagesRequest(BaseModel):
    ids: list[str] = []


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class VacancyIdResponse(BaseModel):
    vacancy_id: str


class MessageIdResponse(BaseModel):
    message_id: str


class DeletedCountResponse(BaseModel):
    deleted: int


class ApplicationSubmittedResponse(BaseModel):
    application_code: str
    applicant_email: str


class VacancyResponse(BaseModel):
    id: str
    title: str
    description: str
    salary: str
    shift: str
    location: str
    status: str
    created_at: datetime | None = None


class ApplicationStatusResponse(BaseModel):
    application_code: str
    applicant_email: str
    full_name: str
    position_title: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ApplicationResponse(BaseModel):
    id: str
    application_code: str
    applicant_email: str
    position_id: str | None = None
    position_title: str
    full_name: str
    age: int | None = None
    gender: str | None = None
    date_of_birth: date
    country: str | None = None
    city: str
    address: str | None = None
    can_work_9_to_5: bool
    years_experience: str
    reference_name: str | None = None
    reference_email: str | None = None
    reference_workplace: str | None = None
    interested_branch: str
    can_work_legally: bool
    cv_file_path: str | None = None
    cv_google_drive_link: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MessageResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    message: str
    branch: str
    status: str
    created_at: datetime | None = None
