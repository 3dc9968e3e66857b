"""
Stats service - read-side queries over the population and disease counters.
"""
from sqlalchemy.orm import Session
from synthstats.models.geography import County, CountySubdivision
from synthstats.models.disease import Disease
from synthstats.models.stats import CountyStats, SubdivisionStats
from synthstats.models.facts import CountyFacts, SubdivisionFacts
from typing import List, Optional, Dict, Any


class StatsService:
    """Business logic for counter queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_subdivision_stats(self, cousub_fp: str) -> Optional[Dict[str, Any]]:
        """Population counters of one county subdivision, or None if unknown."""
        row = self.db.query(SubdivisionStats, CountySubdivision).join(
            CountySubdivision, CountySubdivision.cousub_fp == SubdivisionStats.cousub_fp
        ).filter(
            SubdivisionStats.cousub_fp == cousub_fp
        ).first()

        if row is None:
            return None

        stats, cousub = row
        return {
            "key": cousub.cousub_fp,
            "name": cousub.name,
            "county_fp": cousub.county_fp,
            "state_fp": cousub.state_fp,
            "square_miles": cousub.square_miles,
            "population": int(stats.population),
            "population_male": int(stats.population_male),
            "population_female": int(stats.population_female),
            "population_per_sq_mile": float(stats.population_per_sq_mile),
        }

    def get_county_stats(self, county_fp: str) -> Optional[Dict[str, Any]]:
        """Population counters of one county, or None if unknown."""
        row = self.db.query(CountyStats, County).join(
            County, County.county_fp == CountyStats.county_fp
        ).filter(
            CountyStats.county_fp == county_fp
        ).first()

        if row is None:
            return None

        stats, county = row
        return {
            "key": county.county_fp,
            "name": county.name,
            "county_fp": county.county_fp,
            "state_fp": county.state_fp,
            "square_miles": county.square_miles,
            "population": int(stats.population),
            "population_male": int(stats.population_male),
            "population_female": int(stats.population_female),
            "population_per_sq_mile": float(stats.population_per_sq_mile),
        }

    def get_disease_facts(
        self,
        level: str,
        key: str,
        disease_fp: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Disease case counters for a county or subdivision.

        Args:
            level: county or subdivision
            key: county_fp or cousub_fp
            disease_fp: Optional single disease filter

        Returns:
            List of case counters ordered by disease key
        """
        if level == "county":
            model, key_column = CountyFacts, CountyFacts.county_fp
        elif level == "subdivision":
            model, key_column = SubdivisionFacts, SubdivisionFacts.cousub_fp
        else:
            raise ValueError(f"Unknown level: {level}")

        query = self.db.query(model, Disease.name).join(
            Disease, Disease.disease_fp == model.disease_fp
        ).filter(key_column == key)

        if disease_fp:
            query = query.filter(model.disease_fp == disease_fp)

        results = query.order_by(model.disease_fp).all()

        return [{
            "disease_fp": facts.disease_fp,
            "disease_name": name,
            "population": int(facts.population),
            "population_male": int(facts.population_male),
            "population_female": int(facts.population_female),
        } for facts, name in results]
