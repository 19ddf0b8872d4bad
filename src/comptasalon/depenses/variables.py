"""Depenses variables: couts ponctuels dates, sans historique."""

from __future__ import annotations

import datetime
import logging
from typing import Any

from comptasalon.erreurs import ElementIntrouvable, MontantInvalide
from comptasalon.models.depenses import CategorieDepense, DepenseVariable
from comptasalon.models.monnaie import arrondir, en_decimal
from comptasalon.models.periode import Mois
from comptasalon.stockage import DEPENSES_VARIABLES, Stockage

logger = logging.getLogger(__name__)


def ajouter_depense_variable(
    stockage: Stockage,
    salon_id: str,
    montant: Any,
    date: datetime.date,
    categorie: CategorieDepense = CategorieDepense.AUTRE,
    description: str = "",
) -> DepenseVariable:
    """Enregistre une depense ponctuelle. Le montant doit etre strictement positif."""
    valeur = en_decimal(montant)
    if valeur <= 0:
        raise MontantInvalide(f"Le montant d'une depense doit etre positif: {valeur}")

    depense = DepenseVariable(
        salon_id=salon_id,
        categorie=categorie,
        montant=arrondir(valeur),
        date=date,
        description=description,
    )
    stockage.ajouter(DEPENSES_VARIABLES, depense)
    logger.info("Depense variable enregistree: %s %s le %s", categorie.value, depense.montant, date)
    return depense


def supprimer_depense_variable(stockage: Stockage, depense_id: str) -> DepenseVariable:
    depense = stockage.supprimer(DEPENSES_VARIABLES, depense_id)
    if depense is None:
        raise ElementIntrouvable(f"Depense {depense_id} introuvable")
    return depense


def lister_depenses_variables(
    stockage: Stockage,
    mois: Mois | None = None,
    salon_id: str | None = None,
    categorie: CategorieDepense | None = None,
) -> list[DepenseVariable]:
    """Liste les depenses variables filtrees, les plus recentes d'abord."""
    depenses = stockage.lister(
        DEPENSES_VARIABLES,
        lambda d: (mois is None or mois.contient(d.date))
        and (salon_id is None or d.salon_id == salon_id)
        and (categorie is None or d.categorie == categorie),
    )
    return sorted(depenses, key=lambda d: d.date, reverse=True)
