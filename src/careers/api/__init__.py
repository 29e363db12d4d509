"""Careers domain API package."""

from careers.api.routes import (
    admin_application_router,
    application_router,
    maintenance_router,
    message_router,
    vacancy_router,
)

__all__ = [
    "admin_application_router",
    "application_router",
    "maintenance_router",
    "message_router",
    "vacancy_router",
]
