"""
Résultat d'un appel externe "best effort" (fetch de page, IA).

Ok(value)              -> l'appel a marché
Degraded(value, reason) -> l'appel a échoué, value = valeur de repli

Dans les deux cas .value est utilisable, le pipeline ne s'arrête jamais.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def degraded(self) -> bool:
        return False


@dataclass(frozen=True)
class Degraded(Generic[T]):
    value: T
    reason: str

    @property
    def degraded(self) -> bool:
        return True


Outcome = Union[Ok[T], Degraded[T]]
