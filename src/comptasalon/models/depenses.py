"""Modeles des depenses: fixes (avec echeancier de taux) et variables."""

from __future__ import annotations

import datetime
import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from comptasalon.models.monnaie import Montant
from comptasalon.models.periode import MoisChamp


def nouvel_id() -> str:
    """Identifiant opaque pour le stockage."""
    return uuid.uuid4().hex


class CategorieDepense(str, Enum):
    """Categories de depenses d'un salon."""

    LOYER = "loyer"
    CHARGES_LOCATIVES = "charges_locatives"
    ASSURANCE = "assurance"
    TAXES = "taxes"
    ABONNEMENTS = "abonnements"
    FOURNITURES = "fournitures"
    MARKETING = "marketing"
    EQUIPEMENT = "equipement"
    MAINTENANCE = "maintenance"
    AUTRE = "autre"

    @property
    def libelle(self) -> str:
        return _LIBELLES[self]

    @property
    def est_fixe(self) -> bool:
        """Vrai pour les categories proposees aux depenses recurrentes."""
        return self in CATEGORIES_FIXES


_LIBELLES = {
    CategorieDepense.LOYER: "Loyer",
    CategorieDepense.CHARGES_LOCATIVES: "Charges (eau, electricite)",
    CategorieDepense.ASSURANCE: "Assurance",
    CategorieDepense.TAXES: "Taxes",
    CategorieDepense.ABONNEMENTS: "Abonnements",
    CategorieDepense.FOURNITURES: "Fournitures",
    CategorieDepense.MARKETING: "Marketing",
    CategorieDepense.EQUIPEMENT: "Equipement",
    CategorieDepense.MAINTENANCE: "Maintenance",
    CategorieDepense.AUTRE: "Autre",
}

CATEGORIES_FIXES = frozenset({
    CategorieDepense.LOYER,
    CategorieDepense.CHARGES_LOCATIVES,
    CategorieDepense.ASSURANCE,
    CategorieDepense.TAXES,
    CategorieDepense.ABONNEMENTS,
})


class EntreeTaux(BaseModel):
    """Une entree d'echeancier: montant applicable a partir d'un mois.

    Immuable une fois creee; l'historique ne se modifie que par ajout.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=nouvel_id)
    definition_id: str
    montant: Montant = Field(ge=0)
    effectif_depuis: MoisChamp
    cree_le: datetime.datetime = Field(default_factory=datetime.datetime.now)


class DepenseFixe(BaseModel):
    """Definition d'une depense recurrente mensuelle.

    Le montant n'est pas porte ici: il vit dans les EntreeTaux de la definition.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=nouvel_id)
    salon_id: str
    categorie: CategorieDepense = CategorieDepense.AUTRE
    nom: str
    description: str = ""
    active: bool = True
    cree_le: datetime.datetime = Field(default_factory=datetime.datetime.now)


class DepenseVariable(BaseModel):
    """Depense ponctuelle datee, sans historique."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=nouvel_id)
    salon_id: str
    categorie: CategorieDepense = CategorieDepense.AUTRE
    montant: Montant = Field(gt=0)
    date: datetime.date
    description: str = ""
