"""Structural email validation shared by customer, applicant and message records."""

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def is_valid_email(email: str) -> bool:
    """Check that an email address follows a basic valid structure.

    Exactly one @, non-empty local and domain parts, a dotted domain with no
    leading or trailing hyphens per label, no consecutive dots, no whitespace
    and none of the forbidden characters.
    """
    if not email or any(ch in email for ch in " \t\n"):
        return False

    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False

    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return False

    if "." not in domain_part:
        return False

    for label in domain_part.split("."):
        if label.startswith("-") or label.endswith("-"):
            return False

    if ".." in local_part or ".." in domain_part:
        return False

    return not any(forbidden in email for forbidden in _FORBIDDEN)
