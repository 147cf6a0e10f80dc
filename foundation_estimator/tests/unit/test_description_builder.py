"""
Unit Tests for the Custom Item Description Builder.

Tests:
- Generated descriptions per category, with tags
- Generated descriptions are recognised by the volume engine
- CY per unit from structured dimensions
- build_custom_item() line item / catalog template output
- Rebuilding a spec from stored customData
"""

import pytest

from foundation_estimator.config.errors import ErrorCode, ValidationError
from foundation_estimator.models.line_item import Section, Unit
from foundation_estimator.models.price_history import PricingType
from foundation_estimator.services.description_builder import (
    CustomItemSpec,
    ItemCategory,
    build_custom_item,
    build_description,
    custom_item_from_record,
    cy_per_unit,
    parse_dimension,
    parse_pier_size,
)
from foundation_estimator.services.volume_engine import infer_volume


# =============================================================================
# Dimension parsing
# =============================================================================


class TestParseDimension:

    @pytest.mark.parametrize(
        "text,expected",
        [('16"', 16.0), ("8'", 8.0), ("10.5\"", 10.5), ("", 0.0), ("n/a", 0.0)],
    )
    def test_parse_dimension(self, text, expected):
        assert parse_dimension(text) == expected

    def test_parse_pier_size(self):
        assert parse_pier_size('24"x30"') == (24.0, 30.0)

    def test_parse_pier_size_missing_second(self):
        assert parse_pier_size('24"') == (24.0, 0.0)


# =============================================================================
# Descriptions
# =============================================================================


class TestBuildDescription:

    def test_wall_defaults(self):
        spec = CustomItemSpec(category=ItemCategory.WALL)

        assert build_description(spec) == '4\' x 8" Wall - with 8" x 16" Footings'

    def test_wall_with_tags(self):
        spec = CustomItemSpec(
            category=ItemCategory.WALL,
            wall_height="9'",
            wall_thickness='10"',
            wall_footing_width='12"',
            wall_footing_depth='20"',
            tags=["Garage", "Crawl Space"],
        )

        assert build_description(spec) == (
            '9\' x 10" Wall - with 12" x 20" Footings, Garage, Crawl Space'
        )

    def test_slab(self):
        spec = CustomItemSpec(category=ItemCategory.SLAB, slab_label="Garage Slab", slab_thickness='5"')

        assert build_description(spec) == 'Garage Slab - 5"'

    def test_footing(self):
        spec = CustomItemSpec(category=ItemCategory.FOOTING, footing_width='20"', footing_depth='10"')

        assert build_description(spec) == 'Footings: 20" x 10"'

    def test_pier_ignores_tags(self):
        spec = CustomItemSpec(
            category=ItemCategory.PIER,
            pier_size='36"x36"',
            pier_depth='16"',
            tags=["Garage"],
        )

        assert build_description(spec) == 'Pier Pad: 36" x 36" x 16"'

    def test_other_is_free_text(self):
        spec = CustomItemSpec(category=ItemCategory.OTHER, misc_description="Sump Crock")

        assert build_description(spec) == "Sump Crock"

    @pytest.mark.parametrize(
        "category", [ItemCategory.WALL, ItemCategory.SLAB, ItemCategory.FOOTING, ItemCategory.PIER]
    )
    def test_generated_text_is_recognised(self, category):
        spec = CustomItemSpec(category=category)
        inferred = infer_volume(build_description(spec))

        assert inferred.matched is True
        assert inferred.cubic_yards_per_unit == pytest.approx(cy_per_unit(spec))


class TestCyPerUnit:

    def test_wall(self):
        spec = CustomItemSpec(category=ItemCategory.WALL, wall_height="8'")

        assert cy_per_unit(spec) == pytest.approx((8 * 8 / 12 + 8 / 12 * 16 / 12) / 27)

    def test_slab(self):
        spec = CustomItemSpec(category=ItemCategory.SLAB, slab_thickness='6"')

        assert cy_per_unit(spec) == pytest.approx(0.5 / 27)

    def test_pier(self):
        spec = CustomItemSpec(category=ItemCategory.PIER)

        assert cy_per_unit(spec) == pytest.approx(2 * 2 * 1 / 27)

    def test_other_has_no_volume(self):
        spec = CustomItemSpec(category=ItemCategory.OTHER, misc_description="Sump Crock")

        assert cy_per_unit(spec) == 0


# =============================================================================
# Custom items
# =============================================================================


class TestBuildCustomItem:

    def test_wall_item(self):
        spec = CustomItemSpec(category=ItemCategory.WALL, wall_height="8'", tags=["Garage"])
        result = build_custom_item(spec, quantity="50", unit_price="68")

        assert result.unit == Unit.LF
        assert result.total_cy == pytest.approx(result.cy_per_unit * 50)
        assert result.line_item.description == result.description
        assert result.line_item.unit_price_standard == "68"
        assert result.line_item.unit_price_optional == ""
        assert result.line_item.section == Section.FOOTING_WALL
        assert result.line_item.catalog_item_id == result.catalog_item.id

    def test_optional_column(self):
        spec = CustomItemSpec(category=ItemCategory.PIER)
        result = build_custom_item(spec, quantity="4", unit_price="85", pricing_column=PricingType.OPTIONAL)

        assert result.line_item.unit_price_standard == ""
        assert result.line_item.unit_price_optional == "85"
        assert result.unit == Unit.EA

    def test_slab_defaults_to_slab_section(self):
        result = build_custom_item(CustomItemSpec(category=ItemCategory.SLAB))

        assert result.line_item.section == Section.SLAB
        assert result.line_item.unit == Unit.SF
        assert result.total_cy == 0

    def test_explicit_section(self):
        result = build_custom_item(CustomItemSpec(category=ItemCategory.SLAB), section=Section.FOOTING_WALL)

        assert result.line_item.section == Section.FOOTING_WALL

    def test_catalog_custom_data(self):
        spec = CustomItemSpec(category=ItemCategory.FOOTING, tags=["Stepped"])
        custom = build_custom_item(spec).catalog_item.custom_data

        assert custom["category"] == "footing"
        assert custom["isCustom"] is True
        assert custom["tags"] == ["Stepped"]
        assert custom["dimensions"] == {
            "footingWidth": '8"',
            "footingDepth": '16"',
            "customLabel": "Footings",
        }

    def test_empty_other_description_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            build_custom_item(CustomItemSpec(category=ItemCategory.OTHER, misc_description="  "))

        assert exc_info.value.field == "misc_description"
        assert exc_info.value.code == ErrorCode.EMPTY_DESCRIPTION


class TestCustomItemFromRecord:

    @pytest.mark.parametrize(
        "spec",
        [
            CustomItemSpec(category=ItemCategory.WALL, wall_height="10'", tags=["Porch"]),
            CustomItemSpec(category=ItemCategory.SLAB, slab_label="Driveway", slab_thickness='6"'),
            CustomItemSpec(category=ItemCategory.FOOTING, footing_label="Frost Footing"),
            CustomItemSpec(category=ItemCategory.PIER, pier_size='30"x30"'),
            CustomItemSpec(category=ItemCategory.OTHER, misc_description="Sump Crock"),
        ],
    )
    def test_rebuilt_spec_gives_same_description(self, spec):
        custom_data = build_custom_item(spec).catalog_item.custom_data

        assert build_description(custom_item_from_record(custom_data)) == build_description(spec)

    def test_camel_case_record(self):
        spec = CustomItemSpec.model_validate(
            {"category": "wall", "wallHeight": "9'", "wallFootingWidth": '12"'}
        )

        assert build_description(spec).startswith("9' x 8\" Wall - with 12\" x 16\"")

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            custom_item_from_record({"category": "gazebo"})

        assert exc_info.value.code == ErrorCode.INVALID_FIELD
        assert exc_info.value.field == "category"
