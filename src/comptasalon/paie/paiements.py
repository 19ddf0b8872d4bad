"""Registre des paiements verses aux employes.

Les paiements s'ajoutent sans verification du reste a payer: un trop-percu
est legitime (cout corrige apres coup) et doit rester representable. Les
totaux sont toujours recalcules depuis le stockage, jamais memorises.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from comptasalon.erreurs import CoutIntrouvable, MontantInvalide, PaiementIntrouvable
from comptasalon.models.monnaie import ZERO, arrondir, en_decimal, somme
from comptasalon.models.paie import ModePaiement, Paiement
from comptasalon.stockage import COUTS_SALARIAUX, PAIEMENTS, Stockage

logger = logging.getLogger(__name__)


class RegistrePaiements:
    """Registre des paiements, adosse au stockage."""

    def __init__(self, stockage: Stockage) -> None:
        self.stockage = stockage

    def enregistrer(
        self,
        cout_salarial_id: str,
        montant: Any,
        date_paiement: datetime.date,
        mode: ModePaiement | str = ModePaiement.VIREMENT,
        notes: str | None = None,
    ) -> Paiement:
        """Ajoute un paiement contre un cout salarial.

        Raises:
            MontantInvalide: Si le montant n'est pas strictement positif.
            CoutIntrouvable: Si le cout salarial n'existe pas.
        """
        valeur = en_decimal(montant)
        if valeur <= 0:
            raise MontantInvalide(f"Le montant d'un paiement doit etre positif: {valeur}")

        with self.stockage.transaction():
            if self.stockage.obtenir(COUTS_SALARIAUX, cout_salarial_id) is None:
                raise CoutIntrouvable(f"Cout salarial {cout_salarial_id} introuvable")
            paiement = Paiement(
                cout_salarial_id=cout_salarial_id,
                montant=arrondir(valeur),
                date_paiement=date_paiement,
                mode=ModePaiement(mode),
                notes=notes,
            )
            self.stockage.ajouter(PAIEMENTS, paiement)

        logger.info(
            "Paiement enregistre: %s %s (%s) pour %s",
            paiement.montant, paiement.date_paiement, paiement.mode.value, cout_salarial_id,
        )
        return paiement

    def supprimer(self, paiement_id: str) -> Paiement:
        """Supprime un paiement; le prochain total en tient compte."""
        paiement = self.stockage.supprimer(PAIEMENTS, paiement_id)
        if paiement is None:
            raise PaiementIntrouvable(f"Paiement {paiement_id} introuvable")
        logger.info("Paiement supprime: %s (%s)", paiement_id, paiement.montant)
        return paiement

    def lister(self, cout_salarial_id: str) -> list[Paiement]:
        """Paiements d'un cout salarial, les plus recents d'abord."""
        paiements = self.stockage.lister(
            PAIEMENTS, lambda p: p.cout_salarial_id == cout_salarial_id
        )
        return sorted(paiements, key=lambda p: (p.date_paiement, p.cree_le), reverse=True)

    def total_paye(self, cout_salarial_id: str) -> Decimal:
        """Somme des paiements d'un cout salarial; 0.00 s'il n'y en a aucun."""
        return somme(p.montant for p in self.lister(cout_salarial_id))

    def totaux_pour(self, cout_salarial_ids: Iterable[str]) -> dict[str, Decimal]:
        """Totaux payes pour plusieurs couts.

        Chaque identifiant demande a une entree, a zero s'il n'a aucun paiement.
        """
        totaux = {identifiant: ZERO for identifiant in cout_salarial_ids}
        if not totaux:
            return totaux
        for paiement in self.stockage.lister(PAIEMENTS, lambda p: p.cout_salarial_id in totaux):
            totaux[paiement.cout_salarial_id] += paiement.montant
        return {identifiant: arrondir(total) for identifiant, total in totaux.items()}
