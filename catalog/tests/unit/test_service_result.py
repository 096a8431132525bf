import pytest

from catalog.domain.services import ErrorCodes, service_err, service_ok


@pytest.mark.unit
class TestErrorDict:
    def test_validation_error_names_field(self):
        result = service_err(ErrorCodes.VALIDATION_ERROR, "price must be greater than 0", field="price")

        assert result.to_error_dict() == {
            "error": "validation_error",
            "detail": "price must be greater than 0",
            "field": "price",
        }

    def test_field_is_omitted_when_not_set(self):
        result = service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

        assert result.to_error_dict() == {"error": "product_not_found", "detail": "Product not found"}

    def test_detail_defaults_to_code(self):
        assert service_err(ErrorCodes.INTERNAL_ERROR).to_error_dict()["detail"] == "internal_error"

    def test_successful_result_has_no_error_body(self):
        with pytest.raises(ValueError):
            service_ok("value").to_error_dict()
