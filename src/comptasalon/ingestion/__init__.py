"""Module d'ingestion des exports de paie pour ComptaSalon."""

from comptasalon.ingestion.csv_salaires import (
    LectureCSV,
    analyser_texte_salaires,
    lire_csv_salaires,
)
from comptasalon.ingestion.normalisation import normaliser_montant

__all__ = [
    "LectureCSV",
    "analyser_texte_salaires",
    "lire_csv_salaires",
    "normaliser_montant",
]
