"""Admin application review: status updates."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from careers.application.application import Application
from careers.domain import careers


@careers.command(part_of="Application")
class UpdateApplicationStatus:
    application_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@careers.command_handler(part_of=Application)
class UpdateApplicationStatusHandler:
    @handle(UpdateApplicationStatus)
    def update_application_status(self, command):
        repo = current_domain.repository_for(Application)
        application = repo.get(command.application_id)
        application.change_status(command.status)
        repo.add(application)
