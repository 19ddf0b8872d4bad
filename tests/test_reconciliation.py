"""Tests de la reconciliation du reste a payer.

Scenario principal: revenus 3000, salaire net 1200, charges 400 a 0% de
taxe. Charge technicien = 400, reste a payer = 3000 - 400 - 1200 = 1400.
"""

import datetime
from decimal import Decimal

import pytest

from comptasalon.erreurs import PourcentageTaxeInvalide
from comptasalon.models.paie import CoutSalarial
from comptasalon.models.periode import Mois
from comptasalon.paie.paiements import RegistrePaiements
from comptasalon.paie.reconciliation import (
    StatutReglement,
    reconcilier,
    reconcilier_mois,
    reglements_du_mois,
)
from comptasalon.paie.sommaire import sommaire_mois
from comptasalon.stockage import COUTS_SALARIAUX, Stockage


def _cout(**champs) -> CoutSalarial:
    valeurs = dict(
        nom="Martin", prenom="Julie", mois=3, annee=2026,
        revenus_generes=Decimal("3000"), salaire_net=Decimal("1200"),
        charges=Decimal("400"), pourcentage_taxe=Decimal("0"),
    )
    valeurs.update(champs)
    return CoutSalarial(**valeurs)


class TestReconcilier:
    def test_en_attente(self) -> None:
        etat = reconcilier(_cout(), Decimal("0"))
        assert etat.charge_technicien == Decimal("400.00")
        assert etat.reste_a_payer == Decimal("1400.00")
        assert etat.statut is StatutReglement.EN_ATTENTE

    def test_partiel(self) -> None:
        etat = reconcilier(_cout(), Decimal("800"))
        assert etat.reste_a_payer == Decimal("600.00")
        assert etat.statut is StatutReglement.PARTIEL

    def test_paye(self) -> None:
        etat = reconcilier(_cout(), Decimal("1400"))
        assert etat.reste_a_payer == Decimal("0.00")
        assert etat.statut is StatutReglement.PAYE
        assert etat.trop_percu == Decimal("0.00")

    def test_trop_percu(self) -> None:
        etat = reconcilier(_cout(), Decimal("1450"))
        assert etat.reste_a_payer == Decimal("0.00")
        assert etat.solde == Decimal("-50.00")
        assert etat.statut is StatutReglement.TROP_PERCU
        assert etat.trop_percu == Decimal("50.00")

    def test_rien_du_sans_paiement(self) -> None:
        """Solde negatif sans aucun paiement: rien a verser, donc paye."""
        etat = reconcilier(_cout(revenus_generes=Decimal("1000")), Decimal("0"))
        assert etat.reste_a_payer == Decimal("0.00")
        assert etat.statut is StatutReglement.PAYE

    def test_taxe_reduit_la_charge(self) -> None:
        etat = reconcilier(_cout(pourcentage_taxe=Decimal("50")), Decimal("0"))
        assert etat.charge_technicien == Decimal("200.00")
        assert etat.reste_a_payer == Decimal("1600.00")

    def test_reste_jamais_negatif(self) -> None:
        for paye in ("0", "1399.99", "1400", "1400.01", "99999"):
            assert reconcilier(_cout(), Decimal(paye)).reste_a_payer >= 0

    def test_payer_plus_ne_fait_jamais_monter_le_reste(self) -> None:
        restes = [
            reconcilier(_cout(), Decimal(paye)).reste_a_payer
            for paye in ("0", "0.01", "700", "1399.99", "1400", "2000")
        ]
        assert restes == sorted(restes, reverse=True)

    def test_idempotent(self) -> None:
        cout = _cout()
        assert reconcilier(cout, Decimal("10")) == reconcilier(cout, Decimal("10"))

    def test_pourcentage_invalide(self) -> None:
        cout = _cout().model_copy(update={"pourcentage_taxe": Decimal("120")})
        with pytest.raises(PourcentageTaxeInvalide):
            reconcilier(cout, Decimal("0"))


class TestScenarioComplet:
    def test_en_attente_puis_paye_puis_trop_percu(self) -> None:
        """3000/1200/400 a 50% de taxe: 1600 du, puis paye, puis +50 de trop."""
        stockage = Stockage()
        cout = stockage.ajouter(COUTS_SALARIAUX, _cout(pourcentage_taxe=Decimal("50")))
        registre = RegistrePaiements(stockage)

        etat = reconcilier(cout, registre.total_paye(cout.id))
        assert etat.reste_a_payer == Decimal("1600.00")
        assert etat.statut is StatutReglement.EN_ATTENTE

        registre.enregistrer(cout.id, "1600", datetime.date(2026, 4, 5))
        etat = reconcilier(cout, registre.total_paye(cout.id))
        assert etat.statut is StatutReglement.PAYE

        registre.enregistrer(cout.id, "50", datetime.date(2026, 4, 6))
        etat = reconcilier(cout, registre.total_paye(cout.id))
        assert etat.statut is StatutReglement.TROP_PERCU
        assert etat.reste_a_payer == Decimal("0.00")
        assert etat.trop_percu == Decimal("50.00")


class TestMois:
    def test_reconcilier_mois_trie_par_nom(self) -> None:
        couts = [_cout(nom="Petit"), _cout(nom="Durand"), _cout(nom="martin")]
        lignes = reconcilier_mois(couts, {})
        assert [l.cout.nom for l in lignes] == ["Durand", "martin", "Petit"]
        assert all(l.etat.statut is StatutReglement.EN_ATTENTE for l in lignes)

    def test_reglements_du_mois_filtre(self) -> None:
        stockage = Stockage()
        mars = stockage.ajouter(COUTS_SALARIAUX, _cout())
        stockage.ajouter(COUTS_SALARIAUX, _cout(mois=4))
        RegistrePaiements(stockage).enregistrer(mars.id, "400", datetime.date(2026, 4, 5))

        lignes = reglements_du_mois(stockage, Mois(2026, 3))
        assert len(lignes) == 1
        assert lignes[0].etat.total_paye == Decimal("400.00")
        assert lignes[0].etat.statut is StatutReglement.PARTIEL

    def test_sommaire(self) -> None:
        couts = [_cout(), _cout(nom="Durand", salaire_net=Decimal("1000"))]
        lignes = reconcilier_mois(couts, {couts[0].id: Decimal("1400")})
        resume = sommaire_mois(lignes)
        assert resume.nb_employes == 2
        assert resume.total_net == Decimal("2200.00")
        assert resume.total_charge_technicien == Decimal("800.00")
        assert resume.total_paye == Decimal("1400.00")
        assert resume.total_reste_a_payer == Decimal("1600.00")
        assert resume.nb_par_statut[StatutReglement.PAYE] == 1
        assert resume.nb_par_statut[StatutReglement.EN_ATTENTE] == 1
        assert resume.nb_par_statut[StatutReglement.TROP_PERCU] == 0
