"""Admin back-office accounts: aggregate, creation, login and credential changes."""

from datetime import UTC, datetime

import structlog
from protean import handle, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from shared.auth import hash_password, verify_password
from shared.email import is_valid_email
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.aggregate
class AdminUser:
    username = String(required=True, min_length=3, max_length=50)
    email = String(required=True, max_length=254)
    password_hash = String(required=True, max_length=255)
    created_at = DateTime()

    @invariant.post
    def email_must_be_valid(self):
        if self.email and not is_valid_email(self.email):
            raise ValidationError({"email": ["Please provide a valid email"]})


@storefront.command(part_of="AdminUser")
class CreateAdminUser:
    username = String(required=True, min_length=3, max_length=50)
    email = String(required=True, max_length=254)
    password = String(required=True, min_length=8, max_length=128)


@storefront.command_handler(part_of=AdminUser)
class CreateAdminUserHandler:
    @handle(CreateAdminUser)
    def create_admin_user(self, command):
        repo = current_domain.repository_for(AdminUser)
        if repo._dao.query.filter(username=command.username).all().items:
            raise ValidationError({"username": ["Admin username already exists"]})

        admin = AdminUser(
            username=command.username,
            email=command.email.lower(),
            password_hash=hash_password(command.password),
            created_at=datetime.now(UTC),
        )
        repo.add(admin)
        logger.info("Admin user created", admin_id=str(admin.id), username=admin.username)
        return str(admin.id)


def authenticate_admin(username, password):
    """Return the admin for valid credentials, or None."""
    matches = current_domain.repository_for(AdminUser)._dao.query.filter(username=username).all().items
    admin = matches[0] if matches else None
    if admin is None or not verify_password(password, admin.password_hash):
        logger.info("Admin login failed", username=username)
        return None
    return admin


@storefront.command(part_of="AdminUser")
class ChangeAdminUsername:
    admin_id = Identifier(required=True)
    new_username = String(required=True, min_length=3, max_length=50)


@storefront.command(part_of="AdminUser")
class ChangeAdminPassword:
    admin_id = Identifier(required=True)
    new_password = String(required=True, min_length=8, max_length=128)


@storefront.command_handler(part_of=AdminUser)
class AdminProfileHandler:
    """Credential changes; the caller has already confirmed the current password."""

    @handle(ChangeAdminUsername)
    def change_username(self, command):
        repo = current_domain.repository_for(AdminUser)
        admin = repo.get(command.admin_id)
        taken = repo._dao.query.filter(username=command.new_username).all().items
        if any(str(other.id) != str(admin.id) for other in taken):
            raise ValidationError({"username": ["Username already exists"]})

        admin.username = command.new_username
        repo.add(admin)
        logger.info("Admin username changed", admin_id=str(admin.id), username=admin.username)

    @handle(ChangeAdminPassword)
    def change_password(self, command):
        repo = current_domain.repository_for(AdminUser)
        admin = repo.get(command.admin_id)
        admin.password_hash = hash_password(command.new_password)
        repo.add(admin)
        logger.info("Admin password changed", admin_id=str(admin.id))


def confirm_admin_password(admin_id, password):
    """Return the admin when ``password`` is their current one, or None."""
    admin = current_domain.repository_for(AdminUser).get(admin_id)
    if not verify_password(password, admin.password_hash):
        logger.info("Admin password confirmation failed", admin_id=str(admin_id))
        return None
    return admin
