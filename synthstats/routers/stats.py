"""
Read-only statistics API endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from synthstats.database import get_db
from synthstats.schemas.stats import PopulationStatsResponse, DiseaseFactsResponse
from synthstats.services.stats_service import StatsService
from typing import Optional

router = APIRouter()


@router.get("/subdivisions/{cousub_fp}", response_model=PopulationStatsResponse)
def get_subdivision_stats(cousub_fp: str, db: Session = Depends(get_db)):
    """
    Get population counters for a county subdivision (town).

    - **cousub_fp**: County subdivision key
    """
    stats = StatsService(db).get_subdivision_stats(cousub_fp)
    if stats is None:
        raise HTTPException(status_code=404, detail=f"Unknown county subdivision: {cousub_fp}")
    return stats


@router.get("/counties/{county_fp}", response_model=PopulationStatsResponse)
def get_county_stats(county_fp: str, db: Session = Depends(get_db)):
    """Get population counters for a county."""
    stats = StatsService(db).get_county_stats(county_fp)
    if stats is None:
        raise HTTPException(status_code=404, detail=f"Unknown county: {county_fp}")
    return stats


@router.get("/subdivisions/{cousub_fp}/diseases", response_model=DiseaseFactsResponse)
def get_subdivision_diseases(
    cousub_fp: str,
    disease_fp: Optional[str] = Query(None, description="Filter by disease key"),
    db: Session = Depends(get_db)
):
    """Get active disease case counters for a county subdivision."""
    service = StatsService(db)
    if service.get_subdivision_stats(cousub_fp) is None:
        raise HTTPException(status_code=404, detail=f"Unknown county subdivision: {cousub_fp}")

    diseases = service.get_disease_facts("subdivision", cousub_fp, disease_fp=disease_fp)
    return {
        "key": cousub_fp,
        "level": "subdivision",
        "diseases": diseases,
        "total_diseases": len(diseases)
    }


@router.get("/counties/{county_fp}/diseases", response_model=DiseaseFactsResponse)
def get_county_diseases(
    county_fp: str,
    disease_fp: Optional[str] = Query(None, description="Filter by disease key"),
    db: Session = Depends(get_db)
):
    """Get active disease case counters for a county."""
    service = StatsService(db)
    if service.get_county_stats(county_fp) is None:
        raise HTTPException(status_code=404, detail=f"Unknown county: {county_fp}")

    diseases = service.get_disease_facts("county", county_fp, disease_fp=disease_fp)
    return {
        "key": county_fp,
        "level": "county",
        "diseases": diseases,
        "total_diseases": len(diseases)
    }
