"""Agregation mensuelle des depenses fixes et variables.

Fonctions pures: toutes les donnees sont passees en argument (instantanes
lus du stockage par l'appelant), rien n'est memorise entre deux appels.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from comptasalon.depenses.echeancier import resoudre_montant
from comptasalon.erreurs import AucunTauxApplicable
from comptasalon.models.depenses import (
    CategorieDepense,
    DepenseFixe,
    DepenseVariable,
    EntreeTaux,
)
from comptasalon.models.monnaie import ZERO, arrondir, somme
from comptasalon.models.periode import Mois
from comptasalon.stockage import (
    DEPENSES_FIXES,
    DEPENSES_VARIABLES,
    ENTREES_TAUX,
    Stockage,
)


@dataclass(frozen=True)
class VentilationDepenses:
    """Ventilation des depenses d'un mois.

    ``non_applicables`` liste les depenses fixes actives qui n'existaient pas
    encore ce mois-la: elles comptent pour zero, mais ce zero n'est pas un
    montant reel.
    """

    mois: Mois
    salon_id: str | None
    total_fixes: Decimal
    total_variables: Decimal
    par_categorie: dict[CategorieDepense, Decimal] = field(default_factory=dict)
    non_applicables: tuple[DepenseFixe, ...] = ()

    @property
    def total(self) -> Decimal:
        return self.total_fixes + self.total_variables


def _correspond(salon_id: str | None, filtre: str | None) -> bool:
    return filtre is None or salon_id == filtre


def ventiler_depenses_mois(
    mois: Mois,
    definitions: Iterable[DepenseFixe],
    entrees: Iterable[EntreeTaux],
    variables: Iterable[DepenseVariable],
    salon_id: str | None = None,
) -> VentilationDepenses:
    """Calcule la ventilation fixe/variable/categorie des depenses d'un mois.

    Args:
        mois: Mois vise.
        definitions: Depenses fixes (les inactives sont ignorees).
        entrees: Entrees d'echeancier, toutes definitions confondues.
        variables: Depenses variables, tous mois confondus.
        salon_id: Filtre salon; None pour tous les salons.
    """
    entrees_par_definition: dict[str, list[EntreeTaux]] = defaultdict(list)
    for entree in entrees:
        entrees_par_definition[entree.definition_id].append(entree)

    par_categorie: dict[CategorieDepense, Decimal] = defaultdict(lambda: ZERO)
    montants_fixes: list[Decimal] = []
    non_applicables: list[DepenseFixe] = []

    for definition in definitions:
        if not definition.active or not _correspond(definition.salon_id, salon_id):
            continue
        try:
            montant = resoudre_montant(
                entrees_par_definition.get(definition.id, []), mois, definition.id
            )
        except AucunTauxApplicable:
            non_applicables.append(definition)
            continue
        montants_fixes.append(montant)
        par_categorie[definition.categorie] += montant

    montants_variables: list[Decimal] = []
    for depense in variables:
        if not mois.contient(depense.date) or not _correspond(depense.salon_id, salon_id):
            continue
        montants_variables.append(depense.montant)
        par_categorie[depense.categorie] += depense.montant

    return VentilationDepenses(
        mois=mois,
        salon_id=salon_id,
        total_fixes=somme(montants_fixes),
        total_variables=somme(montants_variables),
        par_categorie={cat: arrondir(v) for cat, v in par_categorie.items()},
        non_applicables=tuple(sorted(non_applicables, key=lambda d: d.nom)),
    )


def total_depenses_mois(
    mois: Mois,
    definitions: Iterable[DepenseFixe],
    entrees: Iterable[EntreeTaux],
    variables: Iterable[DepenseVariable],
    salon_id: str | None = None,
) -> Decimal:
    """Total fixe + variable d'un mois, pour un salon ou tous les salons."""
    return ventiler_depenses_mois(mois, definitions, entrees, variables, salon_id).total


def ventiler_depuis_stockage(
    stockage: Stockage, mois: Mois, salon_id: str | None = None
) -> VentilationDepenses:
    """Lit un instantane du stockage et ventile les depenses du mois."""
    with stockage.lecture():
        definitions = stockage.lister(DEPENSES_FIXES)
        entrees = stockage.lister(ENTREES_TAUX)
        variables = stockage.lister(DEPENSES_VARIABLES)
    return ventiler_depenses_mois(mois, definitions, entrees, variables, salon_id)
