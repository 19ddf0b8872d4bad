"""Tests du type monetaire et du mois calendaire."""

import datetime
from decimal import Decimal

import pytest
from pydantic import BaseModel, ValidationError

from comptasalon.erreurs import MontantInvalide
from comptasalon.models.monnaie import (
    ZERO,
    Montant,
    arrondir,
    en_decimal,
    formater_montant,
    somme,
)
from comptasalon.models.periode import Mois, MoisChamp


class TestArrondi:
    def test_arrondi_au_pair(self) -> None:
        """ROUND_HALF_EVEN: 0.125 -> 0.12, 0.135 -> 0.14."""
        assert arrondir(Decimal("0.125")) == Decimal("0.12")
        assert arrondir(Decimal("0.135")) == Decimal("0.14")

    def test_deux_decimales(self) -> None:
        assert str(arrondir(Decimal("5"))) == "5.00"

    def test_somme_vide(self) -> None:
        assert somme([]) == ZERO

    def test_somme_commutative(self) -> None:
        montants = [Decimal("10.10"), Decimal("0.05"), Decimal("3.33")]
        assert somme(montants) == somme(reversed(montants)) == Decimal("13.48")

    def test_somme_generateur(self) -> None:
        assert somme(Decimal(m) for m in ("0.10", "0.20")) == Decimal("0.30")


class TestEnDecimal:
    def test_chaine(self) -> None:
        assert en_decimal("100.50") == Decimal("100.50")

    def test_entier(self) -> None:
        assert en_decimal(3) == Decimal("3")

    def test_float_refuse(self) -> None:
        with pytest.raises(MontantInvalide, match="float"):
            en_decimal(10.5)

    def test_booleen_refuse(self) -> None:
        with pytest.raises(MontantInvalide):
            en_decimal(True)

    def test_chaine_illisible(self) -> None:
        with pytest.raises(MontantInvalide):
            en_decimal("douze")

    def test_non_fini(self) -> None:
        with pytest.raises(MontantInvalide):
            en_decimal("NaN")


class _Modele(BaseModel):
    montant: Montant


class TestMontantPydantic:
    def test_float_refuse_par_le_modele(self) -> None:
        with pytest.raises(ValidationError):
            _Modele(montant=1.5)

    def test_chaine_acceptee(self) -> None:
        assert _Modele(montant="12.30").montant == Decimal("12.30")


class TestFormaterMontant:
    def test_separateur_milliers(self) -> None:
        assert formater_montant(Decimal("1234567.8")) == "1 234 567.80 EUR"

    def test_devise(self) -> None:
        assert formater_montant(Decimal("5"), "CAD") == "5.00 CAD"


class TestMois:
    def test_lire_texte(self) -> None:
        assert Mois.lire("2026-03") == Mois(2026, 3)

    def test_lire_date(self) -> None:
        assert Mois.lire(datetime.date(2026, 3, 31)) == Mois(2026, 3)

    def test_lire_invalide(self) -> None:
        with pytest.raises(ValueError):
            Mois.lire("mars 2026")

    def test_mois_hors_bornes(self) -> None:
        with pytest.raises(ValueError):
            Mois(2026, 13)

    def test_ordre(self) -> None:
        assert Mois(2025, 12) < Mois(2026, 1) < Mois(2026, 2)

    def test_str(self) -> None:
        assert str(Mois(2026, 4)) == "2026-04"

    def test_dernier_jour_fevrier(self) -> None:
        assert Mois(2028, 2).dernier_jour == datetime.date(2028, 2, 29)

    def test_decaler_change_annee(self) -> None:
        assert Mois(2026, 11).decaler(3) == Mois(2027, 2)
        assert Mois(2026, 1).decaler(-1) == Mois(2025, 12)

    def test_contient(self) -> None:
        assert Mois(2026, 3).contient(datetime.date(2026, 3, 1))
        assert Mois(2026, 3).contient(datetime.date(2026, 3, 31))
        assert not Mois(2026, 3).contient(datetime.date(2026, 4, 1))


class _AvecMois(BaseModel):
    mois: MoisChamp


class TestMoisChamp:
    def test_validation_depuis_texte(self) -> None:
        assert _AvecMois(mois="2026-05").mois == Mois(2026, 5)

    def test_serialisation_json(self) -> None:
        assert _AvecMois(mois=Mois(2026, 5)).model_dump(mode="json") == {"mois": "2026-05"}
