"""Annuaire des employes: rattachement des lignes d'import a une fiche.

Le rattachement se fait par nom. Un nom qui correspond a plusieurs fiches
n'est jamais devine: la ligne est refusee (IdentiteAmbigue).
"""

from __future__ import annotations

import logging
import unicodedata
from decimal import Decimal
from typing import Any

from comptasalon.erreurs import ElementIntrouvable, IdentiteAmbigue
from comptasalon.models.paie import Employe
from comptasalon.paie.charges import valider_pourcentage_taxe
from comptasalon.stockage import EMPLOYES, Stockage

logger = logging.getLogger(__name__)


def normaliser_nom(nom: str) -> str:
    """Minuscules, sans accents ni espaces superflus."""
    decompose = unicodedata.normalize("NFKD", nom)
    sans_accents = "".join(c for c in decompose if not unicodedata.combining(c))
    return " ".join(sans_accents.lower().split())


def premier_prenom(prenom: str) -> str:
    """Premier prenom d'une liste separee par des virgules ("Marie, Anne")."""
    return prenom.split(",")[0].strip()


def prenoms_correspondent(prenom_fiche: str, prenom_import: str) -> bool:
    """Egalite ou prefixe dans un sens ou dans l'autre."""
    a = normaliser_nom(prenom_fiche)
    b = normaliser_nom(premier_prenom(prenom_import))
    if not a or not b:
        return False
    return a == b or a.startswith(b) or b.startswith(a)


class AnnuaireEmployes:
    """Fiches employes stockees, avec recherche par nom."""

    def __init__(self, stockage: Stockage) -> None:
        self.stockage = stockage

    def ajouter(
        self,
        nom: str,
        prenom: str,
        pourcentage_taxe: Any = Decimal("0"),
        matricule: str = "",
        salon_id: str | None = None,
    ) -> Employe:
        employe = Employe(
            nom=nom.strip(),
            prenom=prenom.strip(),
            pourcentage_taxe=valider_pourcentage_taxe(pourcentage_taxe),
            matricule=matricule,
            salon_id=salon_id,
        )
        self.stockage.ajouter(EMPLOYES, employe)
        logger.info("Employe ajoute: %s (%s)", employe.nom_complet, employe.id)
        return employe

    def obtenir(self, employe_id: str) -> Employe:
        employe = self.stockage.obtenir(EMPLOYES, employe_id)
        if employe is None:
            raise ElementIntrouvable(f"Employe {employe_id} introuvable")
        return employe

    def lister(self) -> list[Employe]:
        return sorted(
            self.stockage.lister(EMPLOYES),
            key=lambda e: (normaliser_nom(e.nom), normaliser_nom(e.prenom)),
        )

    def rechercher(self, nom: str, prenom: str) -> list[Employe]:
        """Fiches dont le nom est egal et le prenom compatible."""
        cle_nom = normaliser_nom(nom)
        return [
            e for e in self.stockage.lister(EMPLOYES)
            if normaliser_nom(e.nom) == cle_nom and prenoms_correspondent(e.prenom, prenom)
        ]

    def identifier(self, nom: str, prenom: str) -> Employe | None:
        """Retourne la fiche unique correspondante, ou None si aucune.

        Raises:
            IdentiteAmbigue: Si plusieurs fiches correspondent.
        """
        candidats = self.rechercher(nom, prenom)
        if len(candidats) > 1:
            raise IdentiteAmbigue(nom, prenom, [c.id for c in candidats])
        return candidats[0] if candidats else None
