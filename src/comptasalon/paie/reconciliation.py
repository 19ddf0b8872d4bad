"""Reconciliation du reste a payer par employe et par mois.

    charge_technicien = part des charges du technicien (voir charges.py)
    solde             = revenus_generes - charge_technicien - salaire_net - total_paye
    reste_a_payer     = max(0, solde)

Le solde non borne est conserve pour detecter le trop-percu. Rien n'est
persiste: l'etat se recalcule a chaque lecture a partir du cout salarial et
du total des paiements.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from comptasalon.models.monnaie import ZERO, arrondir
from comptasalon.models.paie import CoutSalarial
from comptasalon.models.periode import Mois
from comptasalon.paie.charges import calculer_charge_technicien
from comptasalon.paie.couts import RegistreCouts
from comptasalon.paie.paiements import RegistrePaiements
from comptasalon.stockage import Stockage


class StatutReglement(str, Enum):
    """Statut de reglement d'un cout salarial."""

    PAYE = "paye"
    PARTIEL = "partiel"
    EN_ATTENTE = "en_attente"
    TROP_PERCU = "trop_percu"


@dataclass(frozen=True)
class EtatReglement:
    """Resultat de reconciliation pour un cout salarial."""

    charge_technicien: Decimal
    total_paye: Decimal
    reste_a_payer: Decimal
    solde: Decimal  # non borne: negatif en cas de trop-percu
    statut: StatutReglement

    @property
    def trop_percu(self) -> Decimal:
        """Montant verse au-dela du du (0 sinon)."""
        if self.statut is StatutReglement.TROP_PERCU:
            return -self.solde
        return ZERO


def reconcilier(cout: CoutSalarial, total_paye: Decimal) -> EtatReglement:
    """Calcule le reste a payer et le statut d'un cout salarial.

    Fonction pure et idempotente; ne leve rien pour un cout salarial valide.

    Args:
        cout: Cout salarial du mois.
        total_paye: Somme des paiements deja verses pour ce cout.
    """
    charge = calculer_charge_technicien(cout.charges, cout.pourcentage_taxe)
    solde = arrondir(cout.revenus_generes - charge - cout.salaire_net - total_paye)
    reste = max(ZERO, solde)

    if reste > 0:
        statut = StatutReglement.PARTIEL if total_paye > 0 else StatutReglement.EN_ATTENTE
    elif solde < 0 and total_paye > 0:
        statut = StatutReglement.TROP_PERCU
    else:
        statut = StatutReglement.PAYE

    return EtatReglement(
        charge_technicien=charge,
        total_paye=arrondir(total_paye),
        reste_a_payer=reste,
        solde=solde,
        statut=statut,
    )


@dataclass(frozen=True)
class LigneReglement:
    """Un cout salarial et son etat de reglement, pret pour l'affichage."""

    cout: CoutSalarial
    etat: EtatReglement


def reconcilier_mois(
    couts: Iterable[CoutSalarial],
    totaux: Mapping[str, Decimal],
) -> list[LigneReglement]:
    """Reconcilie tous les couts d'un mois, tries par nom puis prenom.

    Un cout absent de ``totaux`` est traite comme n'ayant aucun paiement.
    """
    lignes = [
        LigneReglement(cout=cout, etat=reconcilier(cout, totaux.get(cout.id, ZERO)))
        for cout in couts
    ]
    return sorted(lignes, key=lambda l: (l.cout.nom.lower(), l.cout.prenom.lower()))


def reglements_du_mois(stockage: Stockage, mois: Mois) -> list[LigneReglement]:
    """Lit les couts et les totaux payes du mois puis les reconcilie.

    Les lectures se font sous le meme verrou; rien n'est garde en memoire
    apres l'appel.
    """
    with stockage.lecture():
        couts = RegistreCouts(stockage).lister(mois)
        totaux = RegistrePaiements(stockage).totaux_pour(c.id for c in couts)
    return reconcilier_mois(couts, totaux)
