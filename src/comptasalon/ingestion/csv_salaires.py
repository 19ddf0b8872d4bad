"""Lecture des exports CSV de paie (une ligne par employe pour un mois).

Formats acceptes: separateur point-virgule, virgule ou tabulation; en-tetes
francais ("Nom", "Prenom", "Salaire net (EUR)", ...); montants au format
francais ("1 234,56").
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from comptasalon.erreurs import MontantInvalide
from comptasalon.ingestion.normalisation import (
    detecter_encodage,
    detecter_separateur,
    normaliser_montant,
)
from comptasalon.paie.employes import normaliser_nom
from comptasalon.paie.importation import LigneImport

logger = logging.getLogger(__name__)

# En-tete normalise (minuscules, sans accents) -> champ de LigneImport
CORRESPONDANCE_ENTETES: dict[str, str] = {
    "nom": "nom",
    "prenom": "prenom",
    "salaire net (€)": "salaire_net",
    "salaire net": "salaire_net",
    "net": "salaire_net",
    "salaire brut (€)": "salaire_brut",
    "salaire brut": "salaire_brut",
    "brut": "salaire_brut",
    "cout total (€)": "cout_total",
    "cout total": "cout_total",
    "total": "cout_total",
    "charge": "charges",
    "charges": "charges",
}

CHAMPS_MONTANTS = ("salaire_net", "salaire_brut", "cout_total", "charges")


@dataclass
class LectureCSV:
    """Resultat de la lecture d'un fichier de paie."""

    lignes: list[LigneImport] = field(default_factory=list)
    erreurs: list[tuple[int, str]] = field(default_factory=list)


def _champ(entete: str) -> str | None:
    return CORRESPONDANCE_ENTETES.get(normaliser_nom(entete.strip().strip('"')))


def analyser_texte_salaires(texte: str) -> LectureCSV:
    """Analyse le contenu texte d'un export de paie."""
    resultat = LectureCSV()
    lignes_texte = texte.strip().splitlines()
    if len(lignes_texte) < 2:
        return resultat

    separateur = detecter_separateur(lignes_texte[0])
    reader = csv.reader(io.StringIO("\n".join(lignes_texte)), delimiter=separateur)
    entete = [_champ(col) for col in next(reader)]

    if "nom" not in entete or "prenom" not in entete:
        logger.error("Colonnes Nom/Prenom absentes de l'en-tete")
        return resultat

    for lineno, row in enumerate(reader, start=2):
        valeurs = {
            champ: valeur.strip()
            for champ, valeur in zip(entete, row)
            if champ is not None
        }
        if not valeurs.get("nom") or not valeurs.get("prenom"):
            continue
        try:
            for champ in CHAMPS_MONTANTS:
                valeurs[champ] = normaliser_montant(valeurs.get(champ, ""))
            resultat.lignes.append(LigneImport(**valeurs))
        except (MontantInvalide, ValidationError) as e:
            logger.warning("Erreur ligne %d du CSV de paie: %s", lineno, e)
            resultat.erreurs.append((lineno, str(e)))

    return resultat


def lire_csv_salaires(chemin: Path) -> LectureCSV:
    """Lit un fichier CSV de paie depuis le disque."""
    encodage = detecter_encodage(chemin)
    return analyser_texte_salaires(chemin.read_text(encoding=encodage))
