"""Tests CLI pour ComptaSalon (commandes csal)."""

from __future__ import annotations

from decimal import Decimal

import pytest
from typer.testing import CliRunner

from comptasalon.cli.app import app
from comptasalon.stockage import (
    COUTS_SALARIAUX,
    DEPENSES_FIXES,
    DEPENSES_VARIABLES,
    EMPLOYES,
    ENTREES_TAUX,
    PAIEMENTS,
    Stockage,
)

runner = CliRunner()

CSV_PAIE = (
    "Nom;Prénom;Salaire net (€);Salaire brut (€);Coût total (€);Charges\n"
    "Martin;Julie;1 200,00;1 550,00;2 100,00;400,00\n"
)


@pytest.fixture
def donnees(tmp_path, monkeypatch):
    """Fichier de donnees isole; aucun .env ni variable du poste."""
    monkeypatch.chdir(tmp_path)
    for variable in ("COMPTASALON_DONNEES", "COMPTASALON_DEVISE", "COMPTASALON_MODE_PAIEMENT"):
        monkeypatch.delenv(variable, raising=False)
    return tmp_path / "comptasalon.yaml"


def invoquer(donnees, *args, **kwargs):
    return runner.invoke(app, ["--donnees", str(donnees), *args], **kwargs)


class TestApplication:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "ComptaSalon version" in result.output

    def test_aide(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "depense" in result.output
        assert "salaires" in result.output


class TestDepenses:
    def test_creer_et_changer_montant(self, donnees) -> None:
        result = invoquer(
            donnees, "depense", "creer", "salon-1", "Loyer", "1200",
            "--depuis", "2026-01", "--categorie", "loyer",
        )
        assert result.exit_code == 0, result.output
        definition = Stockage(donnees).lister(DEPENSES_FIXES)[0]

        result = invoquer(donnees, "depense", "montant", definition.id, "1250", "--depuis", "2026-04")
        assert result.exit_code == 0, result.output
        montants = sorted(e.montant for e in Stockage(donnees).lister(ENTREES_TAUX))
        assert montants == [Decimal("1200.00"), Decimal("1250.00")]

    def test_montant_retroactif_refuse(self, donnees) -> None:
        invoquer(donnees, "depense", "creer", "salon-1", "Loyer", "1200", "--depuis", "2026-03")
        definition = Stockage(donnees).lister(DEPENSES_FIXES)[0]
        result = invoquer(donnees, "depense", "montant", definition.id, "900", "--depuis", "2026-01")
        assert result.exit_code == 1
        assert "Erreur" in result.output
        assert len(Stockage(donnees).lister(ENTREES_TAUX)) == 1

    def test_total_avec_variable(self, donnees) -> None:
        invoquer(donnees, "depense", "creer", "salon-1", "Loyer", "1200", "--depuis", "2026-01")
        result = invoquer(
            donnees, "depense", "variable", "salon-1", "45,50", "--date", "2026-03-10",
            "--categorie", "fournitures",
        )
        assert result.exit_code == 0, result.output
        assert len(Stockage(donnees).lister(DEPENSES_VARIABLES)) == 1

        result = invoquer(donnees, "depense", "total", "--mois", "2026-03")
        assert result.exit_code == 0, result.output
        assert "1 245.50 EUR" in result.output

    def test_total_signale_depense_future(self, donnees) -> None:
        invoquer(donnees, "depense", "creer", "salon-1", "Assurance", "80", "--depuis", "2026-06")
        result = invoquer(donnees, "depense", "total", "--mois", "2026-03")
        assert result.exit_code == 0, result.output
        assert "pas encore applicable" in result.output

    def test_mois_invalide(self, donnees) -> None:
        result = invoquer(donnees, "depense", "total", "--mois", "2026-13")
        assert result.exit_code != 0

    def test_variable_montant_nul_refuse(self, donnees) -> None:
        result = invoquer(donnees, "depense", "variable", "salon-1", "0")
        assert result.exit_code == 1

    def test_total_rappelle_mois_precedent(self, donnees) -> None:
        invoquer(donnees, "depense", "creer", "salon-1", "Loyer", "1200", "--depuis", "2026-01")
        definition = Stockage(donnees).lister(DEPENSES_FIXES)[0]
        invoquer(donnees, "depense", "montant", definition.id, "1250", "--depuis", "2026-03")

        result = invoquer(donnees, "depense", "total", "--mois", "2026-03")
        assert result.exit_code == 0, result.output
        assert "1 250.00 EUR" in result.output
        assert "Total 2026-02" in result.output
        assert "1 200.00 EUR" in result.output

    def test_variable_categorie_fixe_signalee(self, donnees) -> None:
        result = invoquer(
            donnees, "depense", "variable", "salon-1", "300", "--date", "2026-03-10",
            "--categorie", "loyer",
        )
        assert result.exit_code == 0, result.output
        assert "habituellement une depense fixe" in result.output
        assert len(Stockage(donnees).lister(DEPENSES_VARIABLES)) == 1

    def test_variable_categorie_ponctuelle_sans_avertissement(self, donnees) -> None:
        result = invoquer(
            donnees, "depense", "variable", "salon-1", "30", "--date", "2026-03-10",
            "--categorie", "fournitures",
        )
        assert result.exit_code == 0, result.output
        assert "habituellement" not in result.output


class TestSalairesEtPaiements:
    @pytest.fixture
    def cout_importe(self, donnees, tmp_path):
        """Julie Martin rattachee (taxe 50%) avec 3000 de revenus en mars 2026."""
        invoquer(donnees, "employe", "ajouter", "Martin", "Julie", "--taxe", "50")
        employe = Stockage(donnees).lister(EMPLOYES)[0]
        revenus = tmp_path / "revenus.yaml"
        revenus.write_text(f"{employe.id}: '3000'\n", encoding="utf-8")
        fichier = tmp_path / "paie.csv"
        fichier.write_text(CSV_PAIE, encoding="utf-8")

        result = invoquer(
            donnees, "salaires", "importer", str(fichier), "--mois", "2026-03",
            "--revenus", str(revenus),
        )
        assert result.exit_code == 0, result.output
        return Stockage(donnees).lister(COUTS_SALARIAUX)[0]

    def test_import(self, cout_importe) -> None:
        assert cout_importe.revenus_generes == Decimal("3000.00")
        assert cout_importe.pourcentage_taxe == Decimal("50")
        assert cout_importe.employe_id is not None

    def test_reimport_remplace(self, donnees, tmp_path, cout_importe) -> None:
        result = invoquer(
            donnees, "salaires", "importer", str(tmp_path / "paie.csv"), "--mois", "2026-03",
        )
        assert result.exit_code == 0, result.output
        couts = Stockage(donnees).lister(COUTS_SALARIAUX)
        assert [c.id for c in couts] == [cout_importe.id]

    def test_paiements_jusqu_au_trop_percu(self, donnees, cout_importe) -> None:
        result = invoquer(donnees, "paiement", "ajouter", cout_importe.id, "1600", "--date", "2026-04-05")
        assert result.exit_code == 0, result.output
        assert "(paye)" in result.output

        result = invoquer(donnees, "paiement", "ajouter", cout_importe.id, "50", "--date", "2026-04-06")
        assert result.exit_code == 0, result.output
        assert "Trop-percu: 50.00 EUR" in result.output

    def test_paiement_cout_inconnu(self, donnees) -> None:
        result = invoquer(donnees, "paiement", "ajouter", "inconnu", "10")
        assert result.exit_code == 1
        assert Stockage(donnees).lister(PAIEMENTS) == []

    def test_mode_par_defaut_configure(self, donnees, monkeypatch, cout_importe) -> None:
        monkeypatch.setenv("COMPTASALON_MODE_PAIEMENT", "especes")
        invoquer(donnees, "paiement", "ajouter", cout_importe.id, "10", "--date", "2026-04-05")
        assert Stockage(donnees).lister(PAIEMENTS)[0].mode.value == "especes"

    def test_exporter_beancount(self, donnees, cout_importe) -> None:
        invoquer(donnees, "paiement", "ajouter", cout_importe.id, "800", "--date", "2026-04-05")
        result = invoquer(donnees, "paiement", "exporter", "--mois", "2026-03")
        assert result.exit_code == 0, result.output
        assert "Depenses:Salaires:Reglements" in result.output

    def test_lister_et_sommaire(self, donnees, cout_importe) -> None:
        result = invoquer(donnees, "salaires", "lister", "--mois", "2026-03")
        assert result.exit_code == 0, result.output
        result = invoquer(donnees, "salaires", "sommaire", "--mois", "2026-03")
        assert result.exit_code == 0, result.output
        assert "1 600.00 EUR" in result.output

    def test_corriger(self, donnees, cout_importe) -> None:
        result = invoquer(donnees, "salaires", "corriger", cout_importe.id, "--net", "1300")
        assert result.exit_code == 0, result.output
        assert Stockage(donnees).lister(COUTS_SALARIAUX)[0].salaire_net == Decimal("1300.00")

    def test_supprimer_mois_confirmation(self, donnees, cout_importe) -> None:
        invoquer(donnees, "paiement", "ajouter", cout_importe.id, "100", "--date", "2026-04-05")

        result = invoquer(donnees, "salaires", "supprimer-mois", "2026-03", input="n\n")
        assert result.exit_code != 0
        assert len(Stockage(donnees).lister(COUTS_SALARIAUX)) == 1

        result = invoquer(donnees, "salaires", "supprimer-mois", "2026-03", "--oui")
        assert result.exit_code == 0, result.output
        stockage = Stockage(donnees)
        assert stockage.lister(COUTS_SALARIAUX) == []
        assert stockage.lister(PAIEMENTS) == []

    def test_taxe_employe_invalide(self, donnees) -> None:
        result = invoquer(donnees, "employe", "ajouter", "Petit", "Lea", "--taxe", "120")
        assert result.exit_code == 1
        assert Stockage(donnees).lister(EMPLOYES) == []
