"""Sommaire mensuel des couts salariaux et des reglements."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from comptasalon.models.monnaie import somme
from comptasalon.paie.reconciliation import LigneReglement, StatutReglement


@dataclass(frozen=True)
class SommaireMois:
    """Totaux d'un mois de paie."""

    nb_employes: int
    total_net: Decimal
    total_brut: Decimal
    total_cout: Decimal
    total_charges: Decimal
    total_charge_technicien: Decimal
    total_paye: Decimal
    total_reste_a_payer: Decimal
    nb_par_statut: dict[StatutReglement, int]


def sommaire_mois(lignes: Iterable[LigneReglement]) -> SommaireMois:
    """Agrege les lignes de reglement d'un mois."""
    lignes = list(lignes)
    nb_par_statut = {statut: 0 for statut in StatutReglement}
    for ligne in lignes:
        nb_par_statut[ligne.etat.statut] += 1

    return SommaireMois(
        nb_employes=len(lignes),
        total_net=somme(l.cout.salaire_net for l in lignes),
        total_brut=somme(l.cout.salaire_brut for l in lignes),
        total_cout=somme(l.cout.cout_total for l in lignes),
        total_charges=somme(l.cout.charges for l in lignes),
        total_charge_technicien=somme(l.etat.charge_technicien for l in lignes),
        total_paye=somme(l.etat.total_paye for l in lignes),
        total_reste_a_payer=somme(l.etat.reste_a_payer for l in lignes),
        nb_par_statut=nb_par_statut,
    )
