"""
Species Support for MycoProfiler Enrichment Framework

Exactly two organisms are supported:
- Mycobacterium avium (KEGG organism 'mav')
- Mycobacterium abscessus (KEGG organism 'mab')

Every species-dispatching operation converts its input with
``parse_species`` first, so unknown values fail the same way everywhere.
"""

from enum import Enum
from typing import Dict, Union
from dataclasses import dataclass


class Species(str, Enum):
    """Organisms accepted by the mapping and enrichment operations."""
    AVIUM = "avium"
    ABSCESSUS = "abscessus"


@dataclass(frozen=True)
class SpeciesInfo:
    """Static configuration for a supported species"""
    species: Species
    scientific_name: str
    taxon_id: int
    kegg_organism: str


SUPPORTED_SPECIES: Dict[Species, SpeciesInfo] = {
    Species.AVIUM: SpeciesInfo(
        species=Species.AVIUM,
        scientific_name='Mycobacterium avium',
        taxon_id=1764,
        kegg_organism='mav',
    ),
    Species.ABSCESSUS: SpeciesInfo(
        species=Species.ABSCESSUS,
        scientific_name='Mycobacterium abscessus',
        taxon_id=36809,
        kegg_organism='mab',
    ),
}


class UnrecognizedSpeciesError(ValueError):
    """Raised when a species selector is neither 'avium' nor 'abscessus'."""

    def __init__(self, species, operation: str = "species"):
        self.species = species
        self.operation = operation
        super().__init__(f"{operation}: unrecognized species '{species}'")


class SpeciesNotSupportedError(NotImplementedError):
    """Raised for valid species / operation pairs that are not available."""

    def __init__(self, species: Species, operation: str):
        self.species = species
        self.operation = operation
        info = SUPPORTED_SPECIES[species]
        short_name = f"M. {info.scientific_name.split()[-1]}"
        super().__init__(f"{operation}: {short_name} not supported")


def parse_species(species: Union[str, Species], operation: str = "species") -> Species:
    """
    Normalize a species selector.

    Args:
        species: 'avium', 'abscessus' (any case) or a Species member
        operation: Name of the calling operation, used in the error message

    Returns:
        Species member

    Raises:
        UnrecognizedSpeciesError: For any other value
    """
    if isinstance(species, Species):
        return species

    if isinstance(species, str):
        try:
            return Species(species.strip().lower())
        except ValueError:
            pass

    raise UnrecognizedSpeciesError(species, operation)
