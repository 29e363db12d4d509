"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across users.
State tracks tokens and ids returned by earlier steps so follow-up
requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks a single simulated shopper from registration to checkout."""

    token: str | None = None
    customer_id: str | None = None
    products: list[dict] = field(default_factory=list)
    cart_total: float = 0.0
    order_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


@dataclass
class AdminState:
    """Tracks the back-office session used to seed products and review orders."""

    token: str | None = None
    product_ids: list[str] = field(default_factory=list)
    reviewed_order_ids: set[str] = field(default_factory=set)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


@dataclass
class ApplicantState:
    """Tracks a job applicant's submitted application."""

    application_code: str | None = None
    applicant_email: str | None = None
