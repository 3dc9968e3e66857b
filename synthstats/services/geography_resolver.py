"""
Geography resolver - map locality names to county subdivision and county keys.
"""
from sqlalchemy.orm import Session
from synthstats.config import settings
from synthstats.models.geography import County, CountySubdivision
from typing import Dict, Iterable, NamedTuple, Optional
import logging

logger = logging.getLogger(__name__)


class GeoKey(NamedTuple):
    """Subdivision key and the key of its parent county."""
    cousub_fp: str
    county_fp: str


class GeographyResolver:
    """
    Immutable lookup over the reference geography.

    Built once from the reference tables; every method afterwards is a
    plain dictionary read and safe to share between threads.
    """

    def __init__(
        self,
        subdivisions: Iterable[CountySubdivision],
        counties: Iterable[County] = (),
        undefined_key: str = None
    ):
        self.undefined_key = undefined_key or settings.UNDEFINED_GEO_KEY
        self._by_name: Dict[str, GeoKey] = {}
        self._state_by_county: Dict[str, str] = {}

        for cousub in sorted(subdivisions, key=lambda c: c.cousub_fp):
            if cousub.name in self._by_name:
                logger.warning(
                    f"Duplicate subdivision name {cousub.name!r}: keeping "
                    f"{self._by_name[cousub.name].cousub_fp}, ignoring {cousub.cousub_fp}"
                )
                continue
            self._by_name[cousub.name] = GeoKey(cousub.cousub_fp, cousub.county_fp)
            self._state_by_county.setdefault(cousub.county_fp, cousub.state_fp)

        # Counties carry the authoritative state key
        for county in counties:
            self._state_by_county[county.county_fp] = county.state_fp

    @classmethod
    def from_session(cls, db: Session, undefined_key: str = None) -> "GeographyResolver":
        """Load the reference geography from the database."""
        subdivisions = db.query(CountySubdivision).all()
        counties = db.query(County).all()
        logger.info(f"Loaded {len(subdivisions)} subdivisions in {len(counties)} counties")
        return cls(subdivisions, counties, undefined_key=undefined_key)

    def resolve(self, locality: Optional[str]) -> Optional[GeoKey]:
        """
        Resolve a city name to its subdivision and county.

        Returns None for an empty name, an unknown name, or a name mapped to
        the reserved undefined key.
        """
        if not locality:
            return None
        geo = self._by_name.get(locality)
        if geo is None or geo.cousub_fp in ("", self.undefined_key):
            return None
        return geo

    def state_for_county(self, county_fp: str) -> Optional[str]:
        """Return the state key for a county key, or None if unknown."""
        return self._state_by_county.get(county_fp)

    def __len__(self) -> int:
        return len(self._by_name)
