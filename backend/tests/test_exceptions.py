"""
ParcelTrack Backend — Exception Hierarchy Tests
================================================

What:  Tests for the context dicts carried by ValidationError and NotFoundError.
"""

from parceltrack.exceptions import NotFoundError, ValidationError


class TestExceptionContext:

    def test_validation_error_adds_field(self):
        error = ValidationError("Bad photo.", field="image", context={"extension": ".pdf"})
        assert error.context == {"extension": ".pdf", "field": "image"}

    def test_validation_error_leaves_caller_context_alone(self):
        context = {"missing_fields": ["senderName"]}

        ValidationError("Required fields are missing.", field="senderName", context=context)

        assert context == {"missing_fields": ["senderName"]}

    def test_not_found_error_leaves_caller_context_alone(self):
        context = {"path": "/edit/x"}

        error = NotFoundError("package", "x", context=context)

        assert context == {"path": "/edit/x"}
        assert error.context == {"path": "/edit/x", "resource": "package", "resource_id": "x"}
