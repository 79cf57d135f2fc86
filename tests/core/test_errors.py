"""Error hierarchy tests — HTTP status and response envelope per error type."""

import pytest

from app.core.errors import (
    ConflictError, ErrorCategory, InvalidCredentialsError, LedgerError,
    NotFoundError, PersistenceError, UnauthorizedError, ValidationError,
)


@pytest.mark.parametrize(
    "error,status,code",
    [
        (ValidationError("bad", field="amount"), 400, "VALIDATION_ERROR"),
        (NotFoundError("Goal", 3), 404, "RESOURCE_NOT_FOUND"),
        (UnauthorizedError(2, 3), 403, "UNAUTHORIZED"),
        (InvalidCredentialsError(), 401, "INVALID_CREDENTIALS"),
        (ConflictError("dup"), 409, "CONFLICT"),
        (PersistenceError("disk gone", "save"), 503, "PERSISTENCE_ERROR"),
    ],
)
def test_error_status_and_code(error, status, code):
    assert isinstance(error, LedgerError)
    assert error.http_status == status
    assert error.to_response()["error"]["code"] == code


def test_not_found_message_names_resource():
    assert NotFoundError("Goal", 12).message == "Goal '12' not found"


def test_unauthorized_context_carries_ids():
    body = UnauthorizedError(2, 3).to_response()["error"]
    assert body["category"] == ErrorCategory.AUTHORIZATION.value
    assert body["context"]["owner_id"] == 2
    assert body["context"]["goal_id"] == 3


def test_persistence_error_is_critical():
    error = PersistenceError("timed out after 5s", "load")
    assert error.operation == "load"
    assert error.to_response()["error"]["severity"] == "critical"
    assert error.message == "Document load failed: timed out after 5s"
