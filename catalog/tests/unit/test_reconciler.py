from decimal import Decimal

import pytest

from catalog.domain.exceptions import ProductValidationError
from catalog.domain.services.reconciler import (
    kept_images,
    merge_images,
    parse_keep_images,
    plan_images,
    reconcile_fields,
    removed_images,
)
from catalog.domain.services.validator import validate_update
from catalog.tests.factories import image_url

URL1 = image_url("1-0-a.jpg")
URL2 = image_url("1-1-b.jpg")
URL3 = image_url("1-2-c.jpg")
NEW_URL = image_url("2-0-new.jpg")


@pytest.mark.unit
class TestParseKeepImages:
    def test_absent_means_keep_everything(self):
        assert parse_keep_images(None) is None

    def test_empty_means_keep_nothing(self):
        assert parse_keep_images("") == []
        assert parse_keep_images("[]") == []
        assert parse_keep_images([]) == []

    def test_json_list(self):
        assert parse_keep_images(f'["{URL1}", "{URL2}", "{URL1}"]') == [URL1, URL2]

    def test_single_bare_url(self):
        assert parse_keep_images(URL1) == [URL1]

    def test_python_list(self):
        assert parse_keep_images([URL2, URL1]) == [URL2, URL1]

    @pytest.mark.parametrize("raw", ['["unterminated"', "[1, 2]", '[""]', 42])
    def test_malformed_is_rejected(self, raw):
        with pytest.raises(ProductValidationError) as exc:
            parse_keep_images(raw)
        assert exc.value.field == "keepImages"


@pytest.mark.unit
class TestImageReconciliation:
    def test_keep_one_plus_one_new(self):
        assert merge_images([URL1, URL2], [URL1], [NEW_URL]) == [URL1, NEW_URL]

    def test_no_keep_instruction_appends(self):
        assert merge_images([URL1, URL2], None, [NEW_URL]) == [URL1, URL2, NEW_URL]

    def test_keep_order_is_callers(self):
        assert kept_images([URL1, URL2, URL3], [URL3, URL1]) == [URL3, URL1]

    def test_cannot_keep_foreign_images(self):
        with pytest.raises(ProductValidationError) as exc:
            kept_images([URL1], [URL1, NEW_URL])
        assert exc.value.field == "keepImages"
        assert NEW_URL in exc.value.reason

    def test_plan_rejects_empty_result(self):
        with pytest.raises(ProductValidationError) as exc:
            plan_images([URL1, URL2], [], 0)
        assert exc.value.field == "images"

    def test_plan_rejects_more_than_ten(self):
        existing = [image_url(f"{i}.jpg") for i in range(8)]
        with pytest.raises(ProductValidationError):
            plan_images(existing, None, 3)

    def test_plan_allows_replacing_all(self):
        assert plan_images([URL1, URL2], [], 1) == []

    def test_removed_images(self):
        assert removed_images([URL1, URL2, URL3], [URL2, NEW_URL]) == [URL1, URL3]
        assert removed_images([URL1], [URL1]) == []


@pytest.mark.unit
class TestReconcileFields:
    def test_only_present_fields_become_changes(self):
        changes = reconcile_fields(validate_update({"price": "10", "thickness": ""}))

        assert changes == {"price": Decimal("10"), "thickness": ""}

    def test_cleared_piece_count_is_none(self):
        assert reconcile_fields(validate_update({"numberOfPieces": ""})) == {"number_of_pieces": None}

    def test_empty_update_has_no_changes(self):
        assert reconcile_fields(validate_update({})) == {}
