import importlib.util
import warnings

import pytest

from app.core import errors


@pytest.mark.parametrize(
    "error, kind, status_code",
    [
        (errors.Unauthenticated, "Unauthenticated", 401),
        (errors.Forbidden, "Forbidden", 403),
        (errors.NotFound, "NotFound", 404),
        (errors.InvalidInput, "InvalidInput", 422),
        (errors.AlreadyOwned, "AlreadyOwned", 409),
        (errors.SelfPurchaseForbidden, "SelfPurchaseForbidden", 400),
        (errors.SplitOverAllocated, "SplitOverAllocated", 422),
        (errors.UnknownCollaborator, "UnknownCollaborator", 422),
        (errors.PurchaseRequired, "PurchaseRequired", 403),
        (errors.AlreadyReviewed, "AlreadyReviewed", 409),
        (errors.InvalidRating, "InvalidRating", 422),
        (errors.StorageFailure, "StorageFailure", 500),
    ],
)
def test_error_kinds_and_status_codes(error, kind, status_code):
    exc = error()
    assert exc.kind == kind
    assert exc.status_code == status_code
    assert exc.detail == error.message


def test_custom_message_becomes_detail():
    assert errors.NotFound("Post not found").detail == "Post not found"


def test_errors_module_loads_without_deprecation_warnings():
    spec = importlib.util.spec_from_file_location("errors_fresh_copy", errors.__file__)
    module = importlib.util.module_from_spec(spec)
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        spec.loader.exec_module(module)
    assert module.InvalidRating.status_code == 422
