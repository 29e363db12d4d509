"""Vacancy aggregate with its admin management commands."""

from datetime import UTC, datetime
from enum import Enum

from protean import handle
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from careers.domain import careers


class VacancyStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@careers.aggregate
class Vacancy:
    title = String(required=True, max_length=100)
    description = Text(required=True)
    salary = String(required=True, max_length=100)
    shift = String(required=True, max_length=100)
    location = String(max_length=100, default="Sri Lanka")
    status = String(choices=VacancyStatus, default=VacancyStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    def revise(self, **changes):
        for field_name, value in changes.items():
            if value is not None:
                setattr(self, field_name, value)
        self.updated_at = datetime.now(UTC)


@careers.command(part_of="Vacancy")
class PostVacancy:
    title = String(required=True, max_length=100)
    description = Text(required=True)
    salary = String(required=True, max_length=100)
    shift = String(required=True, max_length=100)
    location = String(max_length=100)
    status = String(max_length=10)


@careers.command(part_of="Vacancy")
class ReviseVacancy:
    vacancy_id = Identifier(required=True)
    title = String(max_length=100)
    description = Text()
    salary = String(max_length=100)
    shift = String(max_length=100)
    location = String(max_length=100)
    status = String(max_length=10)


@careers.command(part_of="Vacancy")
class RemoveVacancy:
    vacancy_id = Identifier(required=True)


@careers.command_handler(part_of=Vacancy)
class ManageVacancyHandler:
    @handle(PostVacancy)
    def post_vacancy(self, command):
        now = datetime.now(UTC)
        vacancy = Vacancy(
            title=command.title.strip(),
            description=command.description.strip(),
            salary=command.salary.strip(),
            shift=command.shift.strip(),
            location=command.location or "Sri Lanka",
            status=command.status or VacancyStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        current_domain.repository_for(Vacancy).add(vacancy)
        return str(vacancy.id)

    @handle(ReviseVacancy)
    def revise_vacancy(self, command):
        repo = current_domain.repository_for(Vacancy)
        vacancy = repo.get(command.vacancy_id)
        vacancy.revise(
            title=command.title,
            description=command.description,
            salary=command.salary,
            shift=command.shift,
            location=command.location,
            status=command.status,
        )
        repo.add(vacancy)

    @handle(RemoveVacancy)
    def remove_vacancy(self, command):
        repo = current_domain.repository_for(Vacancy)
        repo._dao.delete(repo.get(command.vacancy_id))
