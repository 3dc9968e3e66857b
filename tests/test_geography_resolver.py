"""Tests for the geography resolver and the disease catalog."""

import logging

from synthstats.models import County, CountySubdivision
from synthstats.schemas.resources import Coding
from synthstats.services.disease_catalog import DiseaseCatalog
from synthstats.services.geography_resolver import GeoKey, GeographyResolver

from conftest import (
    BEDFORD_FP, BOSTON_FP, MIDDLESEX_FP, SUFFOLK_FP, UNDEFINED_FP,
    DIABETES_FP, DIABETES_SNOMED, UNTRACKED_SNOMED, SNOMED, make_condition,
)


class TestResolve:

    def test_known_city_resolves_to_subdivision_and_county(self, resolver) -> None:
        assert resolver.resolve("Boston") == GeoKey(BOSTON_FP, SUFFOLK_FP)
        assert resolver.resolve("Bedford") == GeoKey(BEDFORD_FP, MIDDLESEX_FP)

    def test_unknown_city_is_none(self, resolver) -> None:
        assert resolver.resolve("Bar") is None

    def test_empty_and_missing_city_are_none(self, resolver) -> None:
        assert resolver.resolve("") is None
        assert resolver.resolve(None) is None

    def test_reserved_undefined_key_is_none(self, resolver) -> None:
        assert resolver.resolve("County subdivisions not defined") is None

    def test_match_is_exact(self, resolver) -> None:
        assert resolver.resolve("boston") is None
        assert resolver.resolve(" Boston") is None

    def test_state_for_county(self, resolver) -> None:
        assert resolver.state_for_county(SUFFOLK_FP) == "25"
        assert resolver.state_for_county("999") is None


class TestDuplicateNames:

    def test_lowest_key_wins_and_duplicate_is_logged(self, caplog) -> None:
        subdivisions = [
            CountySubdivision(cousub_fp="30000", county_fp="009", state_fp="25",
                              name="Newton", square_miles=1.0),
            CountySubdivision(cousub_fp="10000", county_fp="017", state_fp="25",
                              name="Newton", square_miles=1.0),
        ]
        with caplog.at_level(logging.WARNING):
            resolver = GeographyResolver(subdivisions, undefined_key=UNDEFINED_FP)

        assert resolver.resolve("Newton") == GeoKey("10000", "017")
        assert "Duplicate subdivision name" in caplog.text
        assert len(resolver) == 1

    def test_county_rows_override_state(self) -> None:
        resolver = GeographyResolver(
            [CountySubdivision(cousub_fp="10000", county_fp="017", state_fp="99",
                               name="Newton", square_miles=1.0)],
            [County(county_fp="017", state_fp="25", name="Middlesex", square_miles=1.0)],
            undefined_key=UNDEFINED_FP,
        )
        assert resolver.state_for_county("017") == "25"


class TestDiseaseCatalog:

    def test_maps_snomed_code(self, catalog) -> None:
        assert catalog.disease_for_condition(make_condition(DIABETES_SNOMED)) == DIABETES_FP

    def test_untracked_code_is_none(self, catalog) -> None:
        assert catalog.disease_for_condition(make_condition(UNTRACKED_SNOMED)) is None

    def test_other_coding_systems_are_ignored(self) -> None:
        catalog = DiseaseCatalog({DIABETES_SNOMED: DIABETES_FP}, code_system=SNOMED)
        condition = make_condition()
        condition.code.coding[0].system = "http://hl7.org/fhir/sid/icd-10"

        assert catalog.condition_code(condition) == ""
        assert catalog.disease_for_condition(condition) is None

    def test_first_snomed_coding_wins(self) -> None:
        catalog = DiseaseCatalog({DIABETES_SNOMED: DIABETES_FP}, code_system=SNOMED)
        condition = make_condition()
        condition.code.coding.insert(0, Coding(system="urn:other", code="x"))

        assert catalog.condition_code(condition) == DIABETES_SNOMED
