"""Application tests for contact message commands."""

import pytest
from careers.message.message import DeleteMessage, DeleteMessages, MarkMessage, Message, SubmitMessage
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _submit(**overrides):
    payload = {
        "name": "Dilini",
        "email": "Dilini@Example.com",
        "phone": " 0771234567 ",
        "message": "Do you have openings in Kandy?",
        "branch": "Kandy",
    }
    payload.update(overrides)
    return current_domain.process(SubmitMessage(**payload), asynchronous=False)


def _get(message_id):
    return current_domain.repository_for(Message).get(message_id)


class TestSubmitMessage:
    def test_normalizes(self):
        message = _get(_submit())
        assert message.email == "dilini@example.com"
        assert message.phone == "0771234567"
        assert message.status == "unread"

    def test_short_message(self):
        with pytest.raises(ValidationError):
            _submit(message="Hello")


class TestMarkMessage:
    def test_defaults_to_read(self):
        message_id = _submit()
        current_domain.process(MarkMessage(message_id=message_id), asynchronous=False)
        assert _get(message_id).status == "read"

    def test_replied(self):
        message_id = _submit()
        current_domain.process(MarkMessage(message_id=message_id, status="replied"), asynchronous=False)
        assert _get(message_id).status == "replied"


class TestDeleteMessages:
    def test_delete_one(self):
        message_id = _submit()
        current_domain.process(DeleteMessage(message_id=message_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _get(message_id)

    def test_bulk_delete_counts_existing_only(self):
        first = _submit()
        second = _submit()
        keep = _submit()

        deleted = current_domain.process(
            DeleteMessages(message_ids=[first, second, "missing"]), asynchronous=False
        )

        assert deleted == 2
        assert [str(m.id) for m in current_domain.repository_for(Message)._dao.query.all().items] == [keep]

    def test_bulk_delete_requires_ids(self):
        with pytest.raises(ValidationError):
            current_domain.process(DeleteMessages(message_ids=[]), asynchronous=False)
