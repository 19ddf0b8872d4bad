"""Stockage transactionnel des donnees ComptaSalon, persiste en YAML.

Toutes les ecritures passent par ``transaction()``. La transaction la plus
externe prend un verrou exclusif sur un fichier ``.lock`` voisin (partage
entre processus), relit le fichier YAML, applique les ecritures puis remplace
le fichier d'un bloc (fichier temporaire + os.replace). L'etat est restaure si
une exception survient. Hors transaction, les lectures rechargent le fichier
quand un autre ecrivain l'a remplace.
"""

from __future__ import annotations

import fcntl
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import BaseModel

from comptasalon.models.depenses import DepenseFixe, DepenseVariable, EntreeTaux
from comptasalon.models.paie import CoutSalarial, Employe, Paiement

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DEPENSES_FIXES = "depenses_fixes"
ENTREES_TAUX = "entrees_taux"
DEPENSES_VARIABLES = "depenses_variables"
EMPLOYES = "employes"
COUTS_SALARIAUX = "couts_salariaux"
PAIEMENTS = "paiements"

COLLECTIONS: dict[str, type[BaseModel]] = {
    DEPENSES_FIXES: DepenseFixe,
    ENTREES_TAUX: EntreeTaux,
    DEPENSES_VARIABLES: DepenseVariable,
    EMPLOYES: Employe,
    COUTS_SALARIAUX: CoutSalarial,
    PAIEMENTS: Paiement,
}


def _etat_vide() -> dict[str, dict[str, BaseModel]]:
    return {nom: {} for nom in COLLECTIONS}


class Stockage:
    """Stockage cle-valeur par collection, avec transactions.

    Plusieurs instances (ou processus) peuvent partager le meme fichier:
    les transactions sont serialisees par le verrou de fichier et chacune
    part de l'etat le plus recent sur disque.

    Args:
        chemin: Fichier YAML de persistance. ``None`` garde tout en memoire.
    """

    def __init__(self, chemin: str | Path | None = None) -> None:
        self.chemin = Path(chemin) if chemin is not None else None
        self._verrou = threading.RLock()
        self._profondeur = 0
        self._lectures = 0
        self._signature: tuple[int, int, int] | None = None
        self._etat = _etat_vide()
        self._charger()

    @property
    def chemin_verrou(self) -> Path | None:
        """Fichier de verrou partage par les ecrivains de ``chemin``."""
        if self.chemin is None:
            return None
        return self.chemin.with_name(self.chemin.name + ".lock")

    # ------------------------------------------------------------------
    # Persistance
    # ------------------------------------------------------------------

    def _signature_fichier(self) -> tuple[int, int, int] | None:
        """(inode, mtime, taille) du fichier, ou None s'il n'existe pas."""
        if self.chemin is None:
            return None
        try:
            st = os.stat(self.chemin)
        except FileNotFoundError:
            return None
        return (st.st_ino, st.st_mtime_ns, st.st_size)

    def _charger(self) -> None:
        """Recharge l'etat depuis le fichier YAML (vide s'il n'existe pas)."""
        if self.chemin is None:
            return

        signature = self._signature_fichier()
        etat = _etat_vide()
        if signature is not None:
            with open(self.chemin, encoding="utf-8") as f:
                donnees = yaml.safe_load(f)
            if donnees and not isinstance(donnees, dict):
                raise ValueError(f"Format de stockage inattendu dans {self.chemin}")
            for nom, modele in COLLECTIONS.items():
                for item in (donnees or {}).get(nom) or []:
                    objet = modele.model_validate(item)
                    etat[nom][objet.id] = objet

        self._etat = etat
        self._signature = signature
        logger.debug(
            "Stockage charge depuis %s: %s",
            self.chemin,
            ", ".join(f"{nom}={len(objets)}" for nom, objets in etat.items()),
        )

    def _actualiser(self) -> None:
        """Recharge si le fichier a change depuis le dernier chargement.

        Sans effet dans une transaction ou une lecture en cours: l'etat y
        reste celui du debut.
        """
        if self.chemin is None or self._profondeur or self._lectures:
            return
        if self._signature_fichier() != self._signature:
            self._charger()

    def _sauvegarder(self) -> None:
        """Ecrit l'etat complet de facon atomique."""
        if self.chemin is None:
            return

        self.chemin.parent.mkdir(parents=True, exist_ok=True)
        donnees = {
            nom: [objet.model_dump(mode="json") for objet in objets.values()]
            for nom, objets in self._etat.items()
        }

        fd, temporaire = tempfile.mkstemp(
            dir=self.chemin.parent, prefix=f".{self.chemin.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.dump(donnees, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
            os.replace(temporaire, self.chemin)
        except BaseException:
            if os.path.exists(temporaire):
                os.unlink(temporaire)
            raise
        self._signature = self._signature_fichier()

    @contextmanager
    def _verrou_fichier(self) -> Iterator[None]:
        """Verrou exclusif inter-processus sur le fichier ``.lock``."""
        if self.chemin is None:
            yield
            return

        self.chemin.parent.mkdir(parents=True, exist_ok=True)
        with open(self.chemin_verrou, "a") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[Stockage]:
        """Ouvre une transaction; les transactions imbriquees rejoignent l'externe."""
        with self._verrou:
            if self._profondeur:
                self._profondeur += 1
                try:
                    yield self
                finally:
                    self._profondeur -= 1
                return

            with self._verrou_fichier():
                if self._signature_fichier() != self._signature:
                    self._charger()
                instantane = {nom: dict(objets) for nom, objets in self._etat.items()}
                self._profondeur = 1
                try:
                    yield self
                    self._sauvegarder()
                except BaseException:
                    self._etat = instantane
                    raise
                finally:
                    self._profondeur = 0

    @contextmanager
    def lecture(self) -> Iterator[Stockage]:
        """Fige l'etat le temps de plusieurs lectures coherentes.

        Le fichier est remplace d'un bloc par les ecrivains: l'etat recharge
        a l'entree est toujours celui d'une transaction complete.
        """
        with self._verrou:
            self._actualiser()
            self._lectures += 1
            try:
                yield self
            finally:
                self._lectures -= 1

    # ------------------------------------------------------------------
    # Operations CRUD
    # ------------------------------------------------------------------

    def ajouter(self, collection: str, objet: M) -> M:
        """Ajoute un objet. Leve ValueError si l'identifiant existe deja."""
        with self.transaction():
            objets = self._collection(collection)
            if objet.id in objets:
                raise ValueError(f"{collection}: identifiant {objet.id} existe deja")
            objets[objet.id] = objet
        return objet

    def remplacer(self, collection: str, objet: M) -> M:
        """Remplace un objet existant (meme identifiant)."""
        with self.transaction():
            objets = self._collection(collection)
            if objet.id not in objets:
                raise KeyError(f"{collection}: identifiant {objet.id} introuvable")
            objets[objet.id] = objet
        return objet

    def supprimer(self, collection: str, identifiant: str) -> BaseModel | None:
        """Supprime un objet et le retourne, ou None s'il n'existait pas."""
        with self.transaction():
            return self._collection(collection).pop(identifiant, None)

    def obtenir(self, collection: str, identifiant: str) -> BaseModel | None:
        with self._verrou:
            self._actualiser()
            return self._collection(collection).get(identifiant)

    def lister(
        self,
        collection: str,
        predicat: Callable[[BaseModel], bool] | None = None,
    ) -> list:
        """Liste les objets d'une collection, optionnellement filtres."""
        with self._verrou:
            self._actualiser()
            objets = list(self._collection(collection).values())
        if predicat is None:
            return objets
        return [o for o in objets if predicat(o)]

    def _collection(self, nom: str) -> dict[str, BaseModel]:
        if nom not in self._etat:
            raise ValueError(f"Collection inconnue: {nom}")
        return self._etat[nom]
