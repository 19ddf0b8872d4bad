"""Mois calendaire: unite de temps des echeanciers et des imports de paie."""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Annotated, Any

from dateutil.relativedelta import relativedelta
from pydantic import PlainSerializer, PlainValidator

_FORMAT_MOIS = re.compile(r"^(\d{4})-(\d{1,2})$")


@dataclass(frozen=True, order=True)
class Mois:
    """Un mois calendaire (annee, mois), totalement ordonne."""

    annee: int
    mois: int

    def __post_init__(self) -> None:
        if not 1 <= self.mois <= 12:
            raise ValueError(f"Mois invalide: {self.mois} (attendu 1-12)")
        if not 1 <= self.annee <= 9999:
            raise ValueError(f"Annee invalide: {self.annee}")

    @classmethod
    def depuis_date(cls, d: datetime.date) -> Mois:
        return cls(d.year, d.month)

    @classmethod
    def courant(cls) -> Mois:
        """Mois de la date du jour."""
        return cls.depuis_date(datetime.date.today())

    @classmethod
    def lire(cls, valeur: Any) -> Mois:
        """Construit un Mois depuis "YYYY-MM", une date ou un Mois.

        Raises:
            ValueError: Si la valeur n'est pas reconnue.
        """
        if isinstance(valeur, Mois):
            return valeur
        if isinstance(valeur, datetime.date):
            return cls.depuis_date(valeur)
        if isinstance(valeur, str):
            m = _FORMAT_MOIS.match(valeur.strip())
            if m:
                return cls(int(m.group(1)), int(m.group(2)))
        raise ValueError(f"Mois illisible: {valeur!r} (format attendu YYYY-MM)")

    @property
    def premier_jour(self) -> datetime.date:
        return datetime.date(self.annee, self.mois, 1)

    @property
    def dernier_jour(self) -> datetime.date:
        return self.premier_jour + relativedelta(months=1, days=-1)

    def contient(self, d: datetime.date) -> bool:
        """Vrai si la date tombe dans ce mois."""
        return self.premier_jour <= d <= self.dernier_jour

    def decaler(self, nb_mois: int) -> Mois:
        """Retourne le mois decale de nb_mois (negatif pour reculer)."""
        return Mois.depuis_date(self.premier_jour + relativedelta(months=nb_mois))

    def __str__(self) -> str:
        return f"{self.annee:04d}-{self.mois:02d}"


MoisChamp = Annotated[
    Mois,
    PlainValidator(Mois.lire),
    PlainSerializer(str, return_type=str, when_used="json"),
]
