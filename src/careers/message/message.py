"""Contact message aggregate and the commands that manage it."""

from datetime import UTC, datetime
from enum import Enum

import structlog
from protean import handle, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, List, String, Text
from protean.utils.globals import current_domain

from careers.domain import careers
from shared.email import is_valid_email

logger = structlog.get_logger(__name__)


class MessageStatus(Enum):
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"


@careers.aggregate
class Message:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=20)
    message = Text(required=True)
    branch = String(required=True, max_length=100)
    status = String(choices=MessageStatus, default=MessageStatus.UNREAD.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def email_must_be_valid(self):
        if not is_valid_email(self.email or ""):
            raise ValidationError({"email": ["Please enter a valid email"]})

    @invariant.post
    def message_must_have_substance(self):
        if self.message is not None and len(self.message.strip()) < 10:
            raise ValidationError({"message": ["Message must be at least 10 characters"]})

    def mark(self, status):
        if status not in {s.value for s in MessageStatus}:
            raise ValidationError({"status": ["Invalid status"]})
        self.status = status
        self.updated_at = datetime.now(UTC)


@careers.command(part_of="Message")
class SubmitMessage:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=20)
    message = Text(required=True)
    branch = String(required=True, max_length=100)


@careers.command(part_of="Message")
class MarkMessage:
    message_id = Identifier(required=True)
    status = String(default=MessageStatus.READ.value, max_length=10)


@careers.command(part_of="Message")
class DeleteMessage:
    message_id = Identifier(required=True)


@careers.command(part_of="Message")
class DeleteMessages:
    message_ids = List(content_type=String)


@careers.command_handler(part_of=Message)
class ManageMessageHandler:
    @handle(SubmitMessage)
    def submit_message(self, command):
        now = datetime.now(UTC)
        message = Message(
            name=command.name.strip(),
            email=command.email.strip().lower(),
            phone=command.phone.strip() if command.phone else None,
            message=command.message.strip(),
            branch=command.branch,
            created_at=now,
            updated_at=now,
        )
        current_domain.repository_for(Message).add(message)
        logger.info("Contact message received", message_id=str(message.id), branch=message.branch)
        return str(message.id)

    @handle(MarkMessage)
    def mark_message(self, command):
        repo = current_domain.repository_for(Message)
        message = repo.get(command.message_id)
        message.mark(command.status or MessageStatus.READ.value)
        repo.add(message)

    @handle(DeleteMessage)
    def delete_message(self, command):
        repo = current_domain.repository_for(Message)
        repo._dao.delete(repo.get(command.message_id))

    @handle(DeleteMessages)
    def delete_messages(self, command):
        """Delete every listed message that exists; returns how many were deleted."""
        if not command.message_ids:
            raise ValidationError({"message_ids": ["Message IDs array is required"]})

        repo = current_domain.repository_for(Message)
        deleted = 0
        for message_id in command.message_ids:
            matches = repo._dao.query.filter(id=message_id).all().items
            if matches:
                repo._dao.delete(matches[0])
                deleted += 1

        logger.info("Messages deleted", requested=len(command.message_ids), deleted=deleted)
        return deleted
