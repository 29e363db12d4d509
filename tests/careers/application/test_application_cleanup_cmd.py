"""Application tests for application submission, review and stale-application cleanup.

Covers:
- SubmitApplication normalizes the email and returns a unique public code
- status lookup by code and email
- DeleteApplicationsOlderThan deletes only stale rows in the given status,
  removes their CVs and is idempotent
"""

from datetime import UTC, datetime, timedelta

import pytest
from careers.application.application import Application
from careers.application.cleanup import DeleteApplicationsOlderThan
from careers.application.review import UpdateApplicationStatus
from careers.application.submission import SubmitApplication, find_application_by_code
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _submit(**overrides):
    payload = {
        "full_name": "Ruwan Jayasinghe",
        "date_of_birth": "1998-03-14",
        "city": "Colombo",
        "years_experience": "1-3",
        "interested_branch": "Colombo 03",
        "cv_google_drive_link": "https://drive.google.com/file/d/abc",
        "applicant_email": "Ruwan@Example.com",
    }
    payload.update(overrides)
    return current_domain.process(SubmitApplication(**payload), asynchronous=False)


def _application(code):
    return current_domain.repository_for(Application)._dao.query.filter(application_code=code).all().items[0]


def _age(code, status, days):
    """Put the application in ``status`` and backdate its last update."""
    repo = current_domain.repository_for(Application)
    application = _application(code)
    application.status = status
    application.updated_at = datetime.now(UTC) - timedelta(days=days)
    repo.add(application)


def _cleanup(**kwargs):
    return current_domain.process(DeleteApplicationsOlderThan(**kwargs), asynchronous=False)


class TestSubmitApplication:
    def test_returns_code_and_lowercases_email(self):
        code = _submit()
        application = _application(code)
        assert code.startswith("HT-")
        assert application.applicant_email == "ruwan@example.com"
        assert application.status == "pending"

    def test_bad_date_of_birth(self):
        with pytest.raises(ValidationError):
            _submit(date_of_birth="14-03-1998")

    def test_cv_required(self):
        with pytest.raises(ValidationError):
            _submit(cv_google_drive_link=None)


class TestFindApplicationByCode:
    def test_lookup_is_case_insensitive(self):
        code = _submit()
        application = find_application_by_code(code.lower(), " RUWAN@example.com ")
        assert application.application_code == code

    def test_wrong_email(self):
        code = _submit()
        with pytest.raises(ObjectNotFoundError):
            find_application_by_code(code, "someone@example.com")


class TestUpdateApplicationStatus:
    def test_updates(self):
        code = _submit()
        application_id = str(_application(code).id)
        current_domain.process(
            UpdateApplicationStatus(application_id=application_id, status="reviewing"), asynchronous=False
        )
        assert _application(code).status == "reviewing"

    def test_invalid_status(self):
        code = _submit()
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateApplicationStatus(application_id=str(_application(code).id), status="maybe"),
                asynchronous=False,
            )


class TestDeleteApplicationsOlderThan:
    def test_deletes_stale_rejected_only(self):
        stale = _submit()
        fresh = _submit()
        pending = _submit()
        _age(stale, "rejected", 31)
        _age(fresh, "rejected", 5)
        _age(pending, "pending", 90)

        assert _cleanup() == 1

        remaining = {a.application_code for a in current_domain.repository_for(Application)._dao.query.all().items}
        assert remaining == {fresh, pending}

    def test_is_idempotent(self):
        _age(_submit(), "rejected", 45)

        assert _cleanup() == 1
        assert _cleanup() == 0

    def test_custom_status_and_age(self):
        _age(_submit(), "hired", 10)
        assert _cleanup(status="hired", age_days=7) == 1

    def test_removes_cv_files(self, file_storage):
        cv_path = file_storage.save("cvs", "cv", "ruwan.pdf", b"%PDF")
        code = _submit(cv_google_drive_link=None, cv_file_path=cv_path)
        _age(code, "rejected", 60)

        _cleanup()

        assert not file_storage.exists(cv_path)

    def test_cv_deletion_failure_is_not_fatal(self, file_storage):
        cv_path = file_storage.save("cvs", "cv", "ruwan.pdf", b"%PDF")
        code = _submit(cv_google_drive_link=None, cv_file_path=cv_path)
        _age(code, "rejected", 60)
        file_storage.fail_deletes = True

        assert _cleanup() == 1
        assert current_domain.repository_for(Application)._dao.query.all().items == []
