"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
(structural email check, mobile length, colour stock ledger, application
CV requirement) and match the field names of the API's request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

WATCH_SHAPES = ["Round", "Square", "Rectangular", "Oval", "Tonneau"]
COLORS = ["Black", "Silver", "Gold", "Blue", "Red"]
BRANCHES = ["Colombo 03", "Kandy", "Galle"]

# Minimal valid PDF header, enough for the receipt/CV content-type checks.
PDF_BYTES = b"%PDF-1.4\n% load test document\n"


# ---------- Customers ----------


def valid_email() -> str:
    """Generate emails that pass the shared structural email check.

    Rules: exactly one @, no whitespace, dotted domain, no leading/trailing
    dots and no consecutive dots.
    """
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def mobile_number() -> str:
    """Ten-digit local mobile number (8-20 characters accepted)."""
    return f"07{random.randint(10_000_000, 99_999_999)}"


def unique_username() -> str:
    """Usernames are unique and 3-30 characters long."""
    return f"lt_{uuid.uuid4().hex[:12]}"


def registration_data() -> dict:
    """Generate RegisterCustomerRequest payload."""
    return {
        "full_name": fake.name()[:100],
        "date_of_birth": fake.date_of_birth(minimum_age=18, maximum_age=80).isoformat(),
        "country": "Sri Lanka",
        "province": random.choice(["Western", "Central", "Southern"]),
        "city": fake.city()[:100],
        "mobile_number": mobile_number(),
        "email": valid_email(),
        "username": unique_username(),
        "password": "loadtest-secret",
    }


# ---------- Catalogue ----------


def product_data() -> dict:
    """Generate CreateProductRequest payload with a tracked colour ledger."""
    colors = random.sample(COLORS, k=2)
    return {
        "title": f"{fake.word().capitalize()} {random.choice(['Chrono', 'Diver', 'Dress', 'Field'])}"[:100],
        "description": fake.sentence(nb_words=12),
        "brand": fake.company()[:100],
        "watch_shape": random.choice(WATCH_SHAPES),
        "product_type": "watch",
        "price": round(random.uniform(50.0, 900.0), 2),
        "colors": [{"name": name, "quantity": random.randint(50, 500)} for name in colors],
        "images": [f"https://cdn.example.com/{uuid.uuid4().hex[:8]}.jpg"],
    }


def cart_line(product: dict) -> dict:
    """Generate AddToCartRequest for one of the product's colours."""
    return {
        "product_id": product["id"],
        "selected_color": random.choice(product["colors"])["name"],
        "quantity": random.randint(1, 3),
    }


# ---------- Careers ----------


def application_form() -> dict:
    """Generate the multipart form fields of a job application (Drive link CV)."""
    return {
        "full_name": fake.name()[:100],
        "date_of_birth": fake.date_of_birth(minimum_age=18, maximum_age=60).isoformat(),
        "city": fake.city()[:100],
        "years_experience": random.choice(["0-1", "1-3", "3-5", "5-10", "10+"]),
        "interested_branch": random.choice(BRANCHES),
        "applicant_email": valid_email(),
        "cv_google_drive_link": f"https://drive.google.com/file/d/{uuid.uuid4().hex}",
    }


def message_data() -> dict:
    """Generate SubmitMessageRequest payload (message of at least 10 characters)."""
    return {
        "name": fake.first_name(),
        "email": valid_email(),
        "message": fake.sentence(nb_words=10),
        "branch": random.choice(BRANCHES),
    }
