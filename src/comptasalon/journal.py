"""Generation de transactions Beancount pour les paiements aux employes.

Chaque paiement devient une transaction equilibree:
Debit Depenses:Salaires:Reglements, credit du compte de tresorerie du mode
de paiement. Le tag #paie-salon permet de les retrouver dans le grand-livre.
"""

from __future__ import annotations

from decimal import Decimal

from beancount.core import data
from beancount.parser import printer

from comptasalon.models.paie import CoutSalarial, ModePaiement, Paiement
from comptasalon.models.periode import Mois
from comptasalon.paie.couts import RegistreCouts
from comptasalon.paie.paiements import RegistrePaiements
from comptasalon.stockage import Stockage

COMPTE_REGLEMENTS = "Depenses:Salaires:Reglements"

COMPTES_TRESORERIE: dict[ModePaiement, str] = {
    ModePaiement.VIREMENT: "Actifs:Banque:Courant",
    ModePaiement.CHEQUE: "Actifs:Banque:Courant",
    ModePaiement.ESPECES: "Actifs:Caisse",
}


def generer_transaction_paiement(
    paiement: Paiement,
    cout: CoutSalarial,
    devise: str = "EUR",
) -> data.Transaction:
    """Genere la transaction Beancount d'un paiement.

    Raises:
        ValueError: Si le paiement ne porte pas sur ce cout salarial.
    """
    if paiement.cout_salarial_id != cout.id:
        raise ValueError(
            f"Le paiement {paiement.id} ne porte pas sur le cout {cout.id}"
        )

    meta = data.new_metadata("<comptasalon>", 0)
    meta["paiement"] = paiement.id
    meta["cout_salarial"] = cout.id
    meta["periode"] = str(cout.periode)
    meta["mode"] = paiement.mode.value
    if paiement.notes:
        meta["notes"] = paiement.notes

    txn = data.Transaction(
        meta=meta,
        date=paiement.date_paiement,
        flag="*",
        payee=cout.nom_complet,
        narration=f"Reglement salaire {cout.periode}",
        tags=frozenset({"paie-salon"}),
        links=frozenset(),
        postings=[],
    )

    _ajouter_posting(txn, COMPTE_REGLEMENTS, paiement.montant, devise)
    _ajouter_posting(txn, COMPTES_TRESORERIE[paiement.mode], -paiement.montant, devise)
    return txn


def generer_transactions_mois(
    stockage: Stockage, mois: Mois, devise: str = "EUR"
) -> list[data.Transaction]:
    """Transactions de tous les paiements des couts d'un mois, par date."""
    registre = RegistrePaiements(stockage)
    transactions = []
    with stockage.lecture():
        for cout in RegistreCouts(stockage).lister(mois):
            for paiement in registre.lister(cout.id):
                transactions.append(generer_transaction_paiement(paiement, cout, devise))
    return sorted(transactions, key=lambda t: (t.date, t.payee or ""))


def formater_transactions(transactions: list[data.Transaction]) -> str:
    """Texte Beancount des transactions, separees par une ligne vide."""
    return "\n".join(printer.format_entry(txn) for txn in transactions)


def _ajouter_posting(
    txn: data.Transaction,
    compte: str,
    montant: Decimal,
    devise: str,
) -> None:
    """Ajoute un posting a la transaction (helper)."""
    data.create_simple_posting(txn, compte, montant, devise)
