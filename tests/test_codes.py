import grpc
import pytest

from gqlerr.codes import Code, Level, default_level, default_message, grpc_status


def test_codes_are_closed_and_ordered():
    assert [code.value for code in Code] == [
        "invalid_argument",
        "not_found",
        "already_exists",
        "permission_denied",
        "resource_exhausted",
        "failed_precondition",
        "unimplemented",
        "internal",
        "unauthenticated",
    ]


def test_levels_are_ordered():
    assert Level.UNSET < Level.DEBUG < Level.INFO < Level.WARN < Level.ERROR < Level.PANIC


@pytest.mark.parametrize("code", [code for code in Code if code is not Code.INTERNAL])
def test_client_triggerable_codes_default_to_warn(code):
    assert default_level(code) is Level.WARN


def test_internal_defaults_to_error():
    assert default_level(Code.INTERNAL) is Level.ERROR
    assert default_message(Code.INTERNAL) == "internal error"


def test_unknown_code_falls_back():
    assert default_level("not_a_code") is Level.ERROR
    assert default_message("not_a_code") == "internal error"


def test_default_messages():
    assert default_message(Code.PERMISSION_DENIED) == "permission denied"
    assert default_message(Code.FAILED_PRECONDITION) == "failed precondition"


def test_grpc_status_mirrors_code():
    assert grpc_status(Code.NOT_FOUND) is grpc.StatusCode.NOT_FOUND
    assert grpc_status(Code.UNAUTHENTICATED) is grpc.StatusCode.UNAUTHENTICATED
