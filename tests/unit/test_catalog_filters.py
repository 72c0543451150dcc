import pytest

from storefront.core.exceptions import BadRequestError
from storefront.domain.models.catalog import COLOR_TONES, SIZES, THICKNESSES
from storefront.services.catalog_filters import (
    DIMENSIONS,
    FilterCriteria,
    compute_filter_counts,
    empty_filter_counts,
    filter_products,
    format_number,
)
from tests.conftest import make_product, make_variation


class TestFilterCriteria:
    def test_blank_values_are_inactive(self):
        criteria = FilterCriteria.from_query(price="", color_tone="  ", finish=None)
        assert criteria.active() == {}

    def test_text_values_are_trimmed(self):
        criteria = FilterCriteria.from_query(color_tone=" Grey ", size="SIZE 600X600 ")
        assert criteria.active() == {"colorTone": "Grey", "size": "SIZE 600X600"}

    def test_price_range_is_parsed(self):
        assert FilterCriteria.from_query(price="200-300").price == (200.0, 300.0)

    @pytest.mark.parametrize("raw", ["abc", "100", "300-200", "1-2-3", "a-b"])
    def test_malformed_price_is_rejected(self, raw):
        with pytest.raises(BadRequestError) as exc_info:
            FilterCriteria.from_query(price=raw)
        assert exc_info.value.status_code == 400

    def test_non_numeric_pcs_is_rejected(self):
        with pytest.raises(BadRequestError):
            FilterCriteria.from_query(pcs="four")

    def test_pcs_accepts_any_numeric_form(self):
        assert FilterCriteria.from_query(pcs="4.0").pcs == 4
        assert FilterCriteria.from_query(pcs=" 54 ").pcs == 54

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf"])
    def test_non_finite_numbers_are_rejected(self, raw):
        with pytest.raises(BadRequestError):
            FilterCriteria.from_query(pcs=raw)
        with pytest.raises(BadRequestError):
            FilterCriteria.from_query(pack_size=raw)

    def test_without_clears_one_dimension(self):
        criteria = FilterCriteria.from_query(price="0-100", color_tone="Grey")
        assert criteria.without("price").active() == {"colorTone": "Grey"}


class TestFilterProducts:
    def test_no_filters_keeps_everything(self, paving_products):
        matched = filter_products(paving_products, FilterCriteria())
        assert [m.product.slug for m in matched] == ["sandstone", "limestone", "porcelain"]

    def test_product_kept_when_any_variation_matches(self, paving_products):
        matched = filter_products(paving_products, FilterCriteria.from_query(color_tone="Grey"))
        assert [m.product.slug for m in matched] == ["sandstone", "limestone"]
        assert [v.uuid for v in matched[0].variations] == ["v-sand-2"]

    def test_price_range_is_inclusive(self, paving_products):
        matched = filter_products(paving_products, FilterCriteria.from_query(price="150-250"))
        assert [v.uuid for v in matched[0].variations] == ["v-sand-1", "v-sand-2"]

    def test_numeric_filters(self, paving_products):
        by_pcs = filter_products(paving_products, FilterCriteria.from_query(pcs="4"))
        by_pack = filter_products(paving_products, FilterCriteria.from_query(pack_size="1.44"))
        assert [m.product.slug for m in by_pcs] == ["sandstone"]
        assert [m.product.slug for m in by_pack] == ["sandstone", "porcelain"]

    def test_decimal_pcs_matches_whole_piece_count(self, paving_products):
        matched = filter_products(paving_products, FilterCriteria.from_query(pcs="4.0"))
        assert [v.uuid for m in matched for v in m.variations] == ["v-sand-2"]

    def test_missing_value_never_matches(self):
        product = make_product("Bare", [make_variation(uuid="v-bare", Price=100)])
        assert filter_products([product], FilterCriteria.from_query(color_tone="Grey")) == []
        assert len(filter_products([product], FilterCriteria())) == 1


class TestFilterCounts:
    def test_skeleton_lists_fixed_options(self):
        counts = empty_filter_counts()
        assert tuple(counts) == DIMENSIONS
        assert list(counts["price"]) == ["0-200", "200-300", "300-500", "500-1000", "1000-2000"]
        assert set(counts["colorTone"]) == set(COLOR_TONES)
        assert set(counts["thickness"]) == set(THICKNESSES)
        assert set(counts["size"]) == set(SIZES)
        assert counts["finish"] == {} and counts["pcs"] == {} and counts["packSize"] == {}

    def test_counts_without_filters(self, paving_products):
        counts = compute_filter_counts(paving_products, FilterCriteria())

        assert counts["price"] == {"0-200": 1, "200-300": 1, "300-500": 1, "500-1000": 0, "1000-2000": 1}
        assert counts["colorTone"]["Beige"] == 1
        assert counts["colorTone"]["Grey"] == 2
        assert counts["colorTone"]["Black"] == 1
        assert counts["colorTone"]["White"] == 0
        assert counts["finish"] == {"Natural": 1, "Honed": 1, "Tumbled": 1, "r11": 1}
        assert counts["thickness"]["THICKNESS 22MM"] == 2
        assert counts["thickness"]["THICKNESS 20MM"] == 2
        assert counts["size"]["SIZE 600X600"] == 2
        assert counts["pcs"] == {"54": 2, "4": 1, "2": 1}
        assert counts["packSize"] == {"19.5": 2, "1.44": 2}

    def test_own_filter_does_not_suppress_its_group(self, paving_products):
        counts = compute_filter_counts(paving_products, FilterCriteria.from_query(color_tone="Grey"))

        # colour group ignores the colour filter
        assert counts["colorTone"]["Beige"] == 1
        assert counts["colorTone"]["Grey"] == 2
        assert counts["colorTone"]["Black"] == 1
        # other groups only see grey variations
        assert counts["price"] == {"0-200": 0, "200-300": 1, "300-500": 1, "500-1000": 0, "1000-2000": 0}
        assert counts["finish"] == {"Honed": 1, "Tumbled": 1}

    def test_each_group_excludes_only_its_own_filter(self, paving_products):
        criteria = FilterCriteria.from_query(color_tone="Grey", price="0-300")
        counts = compute_filter_counts(paving_products, criteria)

        assert counts["colorTone"]["Beige"] == 1
        assert counts["colorTone"]["Grey"] == 1
        assert counts["colorTone"]["Black"] == 0
        assert counts["price"]["200-300"] == 1
        assert counts["price"]["300-500"] == 1
        assert counts["finish"] == {"Honed": 1}

    def test_pack_size_filter_keeps_its_own_group(self, paving_products):
        counts = compute_filter_counts(paving_products, FilterCriteria.from_query(pack_size="1.44"))

        assert counts["packSize"] == {"19.5": 2, "1.44": 2}
        assert counts["colorTone"]["Grey"] == 1
        assert counts["colorTone"]["Black"] == 1
        assert counts["colorTone"]["Beige"] == 0
        assert counts["price"] == {"0-200": 0, "200-300": 1, "300-500": 0, "500-1000": 0, "1000-2000": 1}
        assert counts["pcs"] == {"4": 1, "2": 1}

    def test_pcs_filter_keeps_its_own_group(self, paving_products):
        counts = compute_filter_counts(paving_products, FilterCriteria.from_query(pcs="54"))

        assert counts["pcs"] == {"54": 2, "4": 1, "2": 1}
        assert counts["colorTone"]["Beige"] == 1
        assert counts["colorTone"]["Grey"] == 1
        assert counts["colorTone"]["Black"] == 0
        assert counts["price"] == {"0-200": 1, "200-300": 0, "300-500": 1, "500-1000": 0, "1000-2000": 0}
        assert counts["packSize"] == {"19.5": 2}
        assert counts["finish"] == {"Natural": 1, "Tumbled": 1}

    def test_price_buckets_are_half_open(self):
        product = make_product("Edge", [
            make_variation(uuid="a", Price=200),
            make_variation(uuid="b", Price=2000),
            make_variation(uuid="c", Price=199.99),
        ])
        counts = compute_filter_counts([product], FilterCriteria())
        assert counts["price"] == {"0-200": 1, "200-300": 1, "300-500": 0, "500-1000": 0, "1000-2000": 0}

    def test_unknown_and_empty_values_are_not_counted(self):
        product = make_product("Odd", [
            make_variation(uuid="a", Size="NA", ColorTone="Purple", Pcs=0, PackSize=0, Finish=""),
        ])
        counts = compute_filter_counts([product], FilterCriteria())
        assert "NA" not in counts["size"]
        assert "Purple" not in counts["colorTone"]
        assert counts["pcs"] == {} and counts["packSize"] == {} and counts["finish"] == {}

    def test_counts_are_per_variation(self):
        product = make_product("Twin", [
            make_variation(uuid="a", ColorTone="White"),
            make_variation(uuid="b", ColorTone="White"),
        ])
        counts = compute_filter_counts([product], FilterCriteria())
        assert counts["colorTone"]["White"] == 2


@pytest.mark.parametrize("value,expected", [(54, "54"), (19.5, "19.5"), (1.44, "1.44"), (20.0, "20")])
def test_format_number(value, expected):
    assert format_number(value) == expected
