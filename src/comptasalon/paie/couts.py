"""Registre des couts salariaux mensuels importes."""

from __future__ import annotations

import datetime
import logging
from typing import Any

from comptasalon.erreurs import CoutIntrouvable, MontantInvalide
from comptasalon.models.monnaie import arrondir, en_decimal
from comptasalon.models.paie import CoutSalarial
from comptasalon.models.periode import Mois
from comptasalon.paie.charges import valider_pourcentage_taxe
from comptasalon.stockage import COUTS_SALARIAUX, PAIEMENTS, Stockage

logger = logging.getLogger(__name__)

CHAMPS_MONTANTS = ("revenus_generes", "salaire_net", "salaire_brut", "cout_total", "charges")


class RegistreCouts:
    """Lecture et correction des couts salariaux."""

    def __init__(self, stockage: Stockage) -> None:
        self.stockage = stockage

    def obtenir(self, cout_id: str) -> CoutSalarial:
        cout = self.stockage.obtenir(COUTS_SALARIAUX, cout_id)
        if cout is None:
            raise CoutIntrouvable(f"Cout salarial {cout_id} introuvable")
        return cout

    def lister(self, mois: Mois) -> list[CoutSalarial]:
        """Couts d'un mois, tries par nom."""
        couts = self.stockage.lister(
            COUTS_SALARIAUX, lambda c: c.annee == mois.annee and c.mois == mois.mois
        )
        return sorted(couts, key=lambda c: (c.nom.lower(), c.prenom.lower()))

    def mois_disponibles(self) -> list[Mois]:
        """Mois ayant des donnees importees, du plus recent au plus ancien."""
        mois = {c.periode for c in self.stockage.lister(COUTS_SALARIAUX)}
        return sorted(mois, reverse=True)

    def corriger_montants(self, cout_id: str, **montants: Any) -> CoutSalarial:
        """Correction explicite des montants d'un cout salarial.

        Seuls les champs monetaires, le pourcentage de taxe et le lien
        employe sont modifiables.
        """
        autorises = set(CHAMPS_MONTANTS) | {"pourcentage_taxe", "employe_id"}
        inconnus = set(montants) - autorises
        if inconnus:
            raise ValueError(f"Champs non corrigeables: {', '.join(sorted(inconnus))}")

        with self.stockage.transaction():
            donnees = self.obtenir(cout_id).model_dump()
            for champ, valeur in montants.items():
                if champ in CHAMPS_MONTANTS:
                    valeur = arrondir(en_decimal(valeur))
                    if valeur < 0:
                        raise MontantInvalide(f"{champ} ne peut etre negatif: {valeur}")
                elif champ == "pourcentage_taxe":
                    valeur = valider_pourcentage_taxe(valeur)
                donnees[champ] = valeur
            donnees["modifie_le"] = datetime.datetime.now()
            cout = CoutSalarial.model_validate(donnees)
            self.stockage.remplacer(COUTS_SALARIAUX, cout)

        logger.info("Cout salarial corrige: %s (%s)", cout_id, ", ".join(sorted(montants)))
        return cout

    def supprimer_mois(self, mois: Mois) -> int:
        """Supprime tous les couts d'un mois et leurs paiements.

        Returns:
            Nombre de couts supprimes.
        """
        with self.stockage.transaction():
            couts = self.lister(mois)
            ids = {c.id for c in couts}
            for paiement in self.stockage.lister(PAIEMENTS, lambda p: p.cout_salarial_id in ids):
                self.stockage.supprimer(PAIEMENTS, paiement.id)
            for cout in couts:
                self.stockage.supprimer(COUTS_SALARIAUX, cout.id)

        logger.info("Mois %s supprime: %d couts salariaux", mois, len(couts))
        return len(couts)
