"""Purge of stale applications: command and handler.

Designed to be triggered periodically by an external scheduler (cron, K8s
CronJob) via the maintenance API endpoint or ``manage.py
cleanup-applications``. Running it twice in a row deletes nothing the second
time.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.fields import DateTime, Integer, String
from protean.utils.globals import current_domain

from careers.application.application import Application, ApplicationStatus
from careers.domain import careers
from shared.storage import get_storage

logger = structlog.get_logger(__name__)


def _naive_utc(value):
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.replace(tzinfo=None)


@careers.command(part_of="Application")
class DeleteApplicationsOlderThan:
    """Delete applications in a status that were last touched before the cutoff."""

    status = String(default=ApplicationStatus.REJECTED.value, max_length=20)
    age_days = Integer(default=30, min_value=0)
    as_of = DateTime()  # Optional: defaults to now


@careers.command_handler(part_of=Application)
class DeleteApplicationsOlderThanHandler:
    @handle(DeleteApplicationsOlderThan)
    def delete_applications_older_than(self, command):
        as_of = command.as_of or datetime.now(UTC)
        cutoff = _naive_utc(as_of - timedelta(days=command.age_days))

        logger.info(
            "Cleaning up applications",
            status=command.status,
            cutoff=cutoff.isoformat(),
            age_days=command.age_days,
        )

        repo = current_domain.repository_for(Application)
        candidates = repo._dao.query.filter(status=command.status).all().items
        stale = [a for a in candidates if a.updated_at and _naive_utc(a.updated_at) < cutoff]

        if not stale:
            logger.info("No applications to clean up")
            return 0

        storage = get_storage()
        for application in stale:
            repo._dao.delete(application)
            if application.cv_file_path:
                try:
                    storage.delete(application.cv_file_path)
                except OSError as exc:
                    logger.warning(
                        "Failed to remove CV of deleted application",
                        application_id=str(application.id),
                        error=str(exc),
                    )

        logger.info("Cleaned up applications", deleted=len(stale), status=command.status)
        return len(stale)
