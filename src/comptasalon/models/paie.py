"""Modeles de la paie: employes, couts salariaux mensuels et paiements."""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from comptasalon.models.depenses import nouvel_id
from comptasalon.models.monnaie import Montant
from comptasalon.models.periode import Mois


class ModePaiement(str, Enum):
    """Moyen de reglement d'un paiement a un employe."""

    VIREMENT = "virement"
    CHEQUE = "cheque"
    ESPECES = "especes"


class Employe(BaseModel):
    """Fiche employe (collaborateur d'identite)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=nouvel_id)
    nom: str
    prenom: str
    matricule: str = ""
    salon_id: Optional[str] = None
    pourcentage_taxe: Montant = Field(default=Decimal("0"), ge=0, le=100)

    @property
    def nom_complet(self) -> str:
        return f"{self.prenom} {self.nom}"


class CoutSalarial(BaseModel):
    """Couts importes d'un employe pour un mois calendaire.

    Le lien vers la fiche employe est optionnel: une ligne non rattachee
    reste valide et se reconcilie normalement.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=nouvel_id)
    employe_id: Optional[str] = None
    nom: str
    prenom: str
    mois: int = Field(ge=1, le=12)
    annee: int = Field(ge=1, le=9999)
    revenus_generes: Montant = Field(default=Decimal("0"), ge=0)
    salaire_net: Montant = Field(default=Decimal("0"), ge=0)
    salaire_brut: Montant = Field(default=Decimal("0"), ge=0)
    cout_total: Montant = Field(default=Decimal("0"), ge=0)
    charges: Montant = Field(default=Decimal("0"), ge=0)
    pourcentage_taxe: Montant = Field(default=Decimal("0"), ge=0, le=100)
    cree_le: datetime.datetime = Field(default_factory=datetime.datetime.now)
    modifie_le: Optional[datetime.datetime] = None

    @property
    def periode(self) -> Mois:
        return Mois(self.annee, self.mois)

    @property
    def nom_complet(self) -> str:
        return f"{self.prenom} {self.nom}"


class Paiement(BaseModel):
    """Paiement verse a un employe contre un cout salarial."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=nouvel_id)
    cout_salarial_id: str
    montant: Montant = Field(gt=0)
    date_paiement: datetime.date
    mode: ModePaiement = ModePaiement.VIREMENT
    notes: Optional[str] = None
    cree_le: datetime.datetime = Field(default_factory=datetime.datetime.now)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_vides(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v
