"""Tests de la configuration par variables d'environnement."""

import os
from pathlib import Path

import pytest

from comptasalon.config import CHEMIN_DONNEES_DEFAUT, charger_configuration
from comptasalon.models.paie import ModePaiement


VARIABLES = ("COMPTASALON_DONNEES", "COMPTASALON_DEVISE", "COMPTASALON_MODE_PAIEMENT")


@pytest.fixture(autouse=True)
def environnement_propre(monkeypatch, tmp_path):
    """Isole de tout .env local et des variables du poste."""
    monkeypatch.chdir(tmp_path)
    for variable in VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    yield
    # load_dotenv ecrit directement dans os.environ
    for variable in VARIABLES:
        os.environ.pop(variable, None)


class TestConfiguration:
    def test_valeurs_par_defaut(self) -> None:
        config = charger_configuration()
        assert config.chemin_donnees == Path(CHEMIN_DONNEES_DEFAUT)
        assert config.devise == "EUR"
        assert config.mode_paiement_defaut is ModePaiement.VIREMENT

    def test_variables_environnement(self, monkeypatch) -> None:
        monkeypatch.setenv("COMPTASALON_DEVISE", "CAD")
        monkeypatch.setenv("COMPTASALON_MODE_PAIEMENT", "cheque")
        config = charger_configuration()
        assert config.devise == "CAD"
        assert config.mode_paiement_defaut is ModePaiement.CHEQUE

    def test_surcharge_prioritaire(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("COMPTASALON_DONNEES", "ailleurs.yaml")
        config = charger_configuration(chemin_donnees=tmp_path / "ici.yaml")
        assert config.chemin_donnees == tmp_path / "ici.yaml"

    def test_surcharge_none_ignoree(self, monkeypatch) -> None:
        monkeypatch.setenv("COMPTASALON_DONNEES", "ailleurs.yaml")
        assert charger_configuration(chemin_donnees=None).chemin_donnees == Path("ailleurs.yaml")

    def test_fichier_env(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("COMPTASALON_DEVISE=CHF\n", encoding="utf-8")
        assert charger_configuration().devise == "CHF"
