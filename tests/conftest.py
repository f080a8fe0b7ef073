from typing import Any

import pytest

from tests.structstest import invalid_create_user, valid_create_user


@pytest.fixture(scope="function")
def valid_user():
    return valid_create_user()


@pytest.fixture(scope="function")
def invalid_user():
    return invalid_create_user()


@pytest.fixture(scope="function")
def register_data() -> dict[str, Any]:
    """The three-failure registration request."""
    return {
        "username": "ab",
        "password": "short",
        "confirm_password": "mismatch",
    }
