"""Echeancier de taux des depenses fixes.

Chaque depense fixe possede un historique d'entrees (montant, mois d'effet)
qui ne se modifie que par ajout, toujours vers l'avant. Le montant d'un mois
est celui de la derniere entree dont le mois d'effet est <= au mois vise.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from comptasalon.erreurs import (
    AucunTauxApplicable,
    DateEffetInvalide,
    DefinitionIntrouvable,
    MontantInvalide,
)
from comptasalon.models.depenses import CategorieDepense, DepenseFixe, EntreeTaux
from comptasalon.models.monnaie import arrondir, en_decimal
from comptasalon.models.periode import Mois
from comptasalon.stockage import DEPENSES_FIXES, ENTREES_TAUX, Stockage

logger = logging.getLogger(__name__)


def trier_entrees(entrees: Iterable[EntreeTaux]) -> list[EntreeTaux]:
    """Trie des entrees par mois d'effet croissant."""
    return sorted(entrees, key=lambda e: e.effectif_depuis)


def entree_applicable(entrees: Iterable[EntreeTaux], mois: Mois) -> EntreeTaux | None:
    """Retourne l'entree en vigueur pour le mois, ou None si aucune."""
    retenue: EntreeTaux | None = None
    for entree in entrees:
        if entree.effectif_depuis <= mois and (
            retenue is None or entree.effectif_depuis > retenue.effectif_depuis
        ):
            retenue = entree
    return retenue


def resoudre_montant(entrees: Iterable[EntreeTaux], mois: Mois, definition_id: str = "") -> Decimal:
    """Resout le montant d'un echeancier pour un mois.

    Fonction pure partagee par l'echeancier et l'agregation mensuelle.

    Raises:
        AucunTauxApplicable: Si le mois precede la premiere entree.
    """
    entree = entree_applicable(entrees, mois)
    if entree is None:
        raise AucunTauxApplicable(definition_id, mois)
    return entree.montant


def _valider_montant(montant: Any) -> Decimal:
    valeur = en_decimal(montant)
    if valeur < 0:
        raise MontantInvalide(f"Le montant d'une depense fixe ne peut etre negatif: {valeur}")
    return arrondir(valeur)


@dataclass(frozen=True)
class EntreeHistorique:
    """Entree d'historique annotee: est-elle celle en vigueur maintenant?"""

    entree: EntreeTaux
    en_vigueur: bool

    @property
    def montant(self) -> Decimal:
        return self.entree.montant

    @property
    def effectif_depuis(self) -> Mois:
        return self.entree.effectif_depuis


class HistoriqueTaux:
    """Sequence paresseuse et reiterable de l'historique d'une definition.

    Chaque iteration relit le stockage: un ajout entre deux parcours est vu
    au parcours suivant.
    """

    def __init__(self, stockage: Stockage, definition_id: str, maintenant: Mois | None = None) -> None:
        self._stockage = stockage
        self._definition_id = definition_id
        self._maintenant = maintenant

    def __iter__(self) -> Iterator[EntreeHistorique]:
        entrees = trier_entrees(
            self._stockage.lister(
                ENTREES_TAUX, lambda e: e.definition_id == self._definition_id
            )
        )
        maintenant = self._maintenant or Mois.courant()
        active = entree_applicable(entrees, maintenant)
        for entree in entrees:
            yield EntreeHistorique(entree=entree, en_vigueur=active is not None and entree.id == active.id)


@dataclass(frozen=True)
class DepenseFixeDuMois:
    """Depense fixe active avec son montant resolu pour un mois donne.

    ``montant`` vaut None si la depense n'etait pas encore applicable.
    """

    depense: DepenseFixe
    montant: Decimal | None
    effectif_depuis: Mois | None

    @property
    def applicable(self) -> bool:
        return self.montant is not None


class EcheancierTaux:
    """Operations sur les depenses fixes et leurs echeanciers."""

    def __init__(self, stockage: Stockage) -> None:
        self.stockage = stockage

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def creer_depense_fixe(
        self,
        salon_id: str,
        nom: str,
        montant: Any,
        effectif_depuis: Mois | str | datetime.date,
        categorie: CategorieDepense = CategorieDepense.AUTRE,
        description: str = "",
    ) -> DepenseFixe:
        """Cree une depense fixe et sa premiere entree dans une seule transaction.

        La premiere entree rend la depense applicable a partir de son mois.
        """
        valeur = _valider_montant(montant)
        mois = Mois.lire(effectif_depuis)
        depense = DepenseFixe(
            salon_id=salon_id, categorie=categorie, nom=nom, description=description,
        )
        with self.stockage.transaction():
            self.stockage.ajouter(DEPENSES_FIXES, depense)
            self.stockage.ajouter(
                ENTREES_TAUX,
                EntreeTaux(definition_id=depense.id, montant=valeur, effectif_depuis=mois),
            )
        logger.info("Depense fixe creee: %s (%s) %s a partir de %s", nom, depense.id, valeur, mois)
        return depense

    def obtenir(self, definition_id: str) -> DepenseFixe:
        depense = self.stockage.obtenir(DEPENSES_FIXES, definition_id)
        if depense is None:
            raise DefinitionIntrouvable(f"Depense fixe {definition_id} introuvable")
        return depense

    def modifier_depense_fixe(self, definition_id: str, **champs: Any) -> DepenseFixe:
        """Modifie les champs descriptifs d'une depense fixe (jamais son montant)."""
        autorises = {"salon_id", "categorie", "nom", "description", "active"}
        inconnus = set(champs) - autorises
        if inconnus:
            raise ValueError(f"Champs non modifiables: {', '.join(sorted(inconnus))}")

        with self.stockage.transaction():
            donnees = self.obtenir(definition_id).model_dump()
            donnees.update(champs)
            depense = DepenseFixe.model_validate(donnees)
            self.stockage.remplacer(DEPENSES_FIXES, depense)
        return depense

    def desactiver(self, definition_id: str) -> DepenseFixe:
        """Desactive une depense fixe; son historique est conserve."""
        depense = self.modifier_depense_fixe(definition_id, active=False)
        logger.info("Depense fixe desactivee: %s", definition_id)
        return depense

    def lister_definitions(self, salon_id: str | None = None, actives_seulement: bool = True) -> list[DepenseFixe]:
        definitions = self.stockage.lister(
            DEPENSES_FIXES,
            lambda d: (salon_id is None or d.salon_id == salon_id)
            and (d.active or not actives_seulement),
        )
        return sorted(definitions, key=lambda d: (d.categorie.value, d.nom))

    # ------------------------------------------------------------------
    # Echeancier
    # ------------------------------------------------------------------

    def entrees(self, definition_id: str) -> list[EntreeTaux]:
        """Entrees de la definition, de la plus ancienne a la plus recente."""
        return trier_entrees(
            self.stockage.lister(ENTREES_TAUX, lambda e: e.definition_id == definition_id)
        )

    def fixer_montant(
        self,
        definition_id: str,
        montant: Any,
        effectif_depuis: Mois | str | datetime.date,
    ) -> EntreeTaux:
        """Ajoute une entree a l'echeancier.

        Raises:
            DateEffetInvalide: Si le mois d'effet n'est pas strictement
                posterieur a toutes les entrees existantes.
            MontantInvalide: Si le montant est negatif ou illisible.
            DefinitionIntrouvable: Si la definition n'existe pas.
        """
        valeur = _valider_montant(montant)
        mois = Mois.lire(effectif_depuis)

        with self.stockage.transaction():
            self.obtenir(definition_id)
            existantes = self.entrees(definition_id)
            if existantes and mois <= existantes[-1].effectif_depuis:
                raise DateEffetInvalide(
                    f"Le mois d'effet {mois} doit etre posterieur a "
                    f"{existantes[-1].effectif_depuis} (pas de modification retroactive)"
                )
            entree = EntreeTaux(definition_id=definition_id, montant=valeur, effectif_depuis=mois)
            self.stockage.ajouter(ENTREES_TAUX, entree)

        logger.info("Nouveau montant pour %s: %s a partir de %s", definition_id, valeur, mois)
        return entree

    def resoudre(self, definition_id: str, mois: Mois | str | datetime.date) -> Decimal:
        """Montant en vigueur pour le mois.

        La desactivation arrete la resolution; l'historique reste lisible
        par ``historique``.

        Raises:
            AucunTauxApplicable: Si le mois precede la premiere entree ou si
                la depense est desactivee.
        """
        cible = Mois.lire(mois)
        if not self.obtenir(definition_id).active:
            raise AucunTauxApplicable(
                definition_id, cible,
                message=f"La depense {definition_id} est desactivee: aucun montant en {cible}",
            )
        return resoudre_montant(self.entrees(definition_id), cible, definition_id)

    def historique(self, definition_id: str, maintenant: Mois | None = None) -> HistoriqueTaux:
        """Historique paresseux, du plus ancien au plus recent."""
        self.obtenir(definition_id)
        return HistoriqueTaux(self.stockage, definition_id, maintenant)

    def depenses_fixes_du_mois(
        self, mois: Mois | str | datetime.date, salon_id: str | None = None
    ) -> list[DepenseFixeDuMois]:
        """Depenses fixes actives avec leur montant pour le mois."""
        cible = Mois.lire(mois)
        resultat = []
        for depense in self.lister_definitions(salon_id):
            entree = entree_applicable(self.entrees(depense.id), cible)
            resultat.append(
                DepenseFixeDuMois(
                    depense=depense,
                    montant=entree.montant if entree else None,
                    effectif_depuis=entree.effectif_depuis if entree else None,
                )
            )
        return resultat
