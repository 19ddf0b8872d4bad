"""Repartition des charges sociales entre le salon et le technicien.

La part du technicien suit une seule droite:

    charge_technicien = charges * (1 - pourcentage_taxe / 100)

arrondie au centime (ROUND_HALF_EVEN). Les points 0, 50 et 100 sont exacts:
0% -> la totalite des charges, 50% -> la moitie, 100% -> rien.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from comptasalon.erreurs import MontantInvalide, PourcentageTaxeInvalide
from comptasalon.models.monnaie import arrondir, en_decimal

CENT = Decimal("100")
UN = Decimal("1")


def valider_pourcentage_taxe(pourcentage_taxe: Any) -> Decimal:
    """Retourne le pourcentage en Decimal s'il est dans [0, 100].

    Raises:
        PourcentageTaxeInvalide: Valeur hors bornes ou illisible.
    """
    try:
        p = en_decimal(pourcentage_taxe)
    except MontantInvalide as e:
        raise PourcentageTaxeInvalide(
            f"Pourcentage de taxe illisible: {pourcentage_taxe!r}"
        ) from e
    if not Decimal("0") <= p <= CENT:
        raise PourcentageTaxeInvalide(
            f"Pourcentage de taxe hors de [0, 100]: {pourcentage_taxe}"
        )
    return p


def calculer_charge_technicien(charges: Decimal, pourcentage_taxe: Any) -> Decimal:
    """Part des charges supportee par le technicien.

    Args:
        charges: Total des charges de la periode.
        pourcentage_taxe: Part prise en charge par le salon, de 0 a 100.

    Returns:
        La charge technicien, arrondie au centime.

    Raises:
        PourcentageTaxeInvalide: Si le pourcentage est hors de [0, 100].
    """
    p = valider_pourcentage_taxe(pourcentage_taxe)
    return arrondir(charges * (UN - p / CENT))
