from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, Throttled, ValidationError
from rest_framework.test import APIRequestFactory

from apps.api.exceptions import (
    ApplicationError,
    DatabaseError,
    ResourceNotFoundError,
    global_exception_handler,
)

factory = APIRequestFactory()


class DummyView:
    pass


def _context(request):
    return {"request": request, "view": DummyView()}


def test_application_error_returns_structured_response():
    request = factory.get("/products/1")
    exc = ApplicationError(
        "CONFLICT",
        "Product already exists",
        status_code=status.HTTP_409_CONFLICT,
        details={"productId": 1},
    )
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_409_CONFLICT
    assert payload["code"] == "CONFLICT"
    assert payload["message"] == "Product already exists"
    assert payload["details"] == {"productId": 1}


def test_resource_not_found_maps_to_404():
    request = factory.get("/products/999")
    exc = ResourceNotFoundError("ID not found: 999", details={"id": "999"})
    response = global_exception_handler(exc, _context(request))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data["error"] == {
        "code": "NOT_FOUND",
        "message": "ID not found: 999",
        "status": 404,
        "details": {"id": "999"},
    }


def test_database_error_maps_to_409():
    request = factory.delete("/categories/1")
    response = global_exception_handler(DatabaseError(), _context(request))
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.data["error"]["code"] == "DATABASE_ERROR"
    assert response.data["error"]["message"] == "Integrity violation"


def test_object_does_not_exist_becomes_not_found():
    request = factory.get("/products/3")
    response = global_exception_handler(ObjectDoesNotExist("gone"), _context(request))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data["error"]["code"] == "NOT_FOUND"


def test_validation_error_preserves_details():
    request = factory.post("/products", data={})
    exc = ValidationError({"name": ["This field is required."]})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["message"] == "Validation failed"
    assert payload["details"] == {"name": ["This field is required."]}


def test_django_validation_error_is_converted():
    request = factory.post("/products", data={})
    exc = DjangoValidationError({"price": ["Must be positive"]})
    response = global_exception_handler(exc, _context(request))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["error"]["details"] == {"price": ["Must be positive"]}


def test_not_authenticated_carries_bearer_hint():
    request = factory.post("/products")
    response = global_exception_handler(NotAuthenticated(), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert payload["code"] == "UNAUTHORIZED"
    assert "Bearer" in payload["hint"]


def test_throttled_reports_retry_after():
    request = factory.get("/products")
    response = global_exception_handler(Throttled(wait=12), _context(request))
    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert response.data["error"]["details"] == {"retryAfter": 12}
    assert response["Retry-After"] == "12"


def test_unhandled_exception_returns_generic_message():
    request = factory.get("/products")
    response = global_exception_handler(RuntimeError("boom"), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert payload["code"] == "SERVER_ERROR"
    assert payload["message"] == "Something went wrong"
    assert "details" not in payload
