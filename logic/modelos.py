from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


Tipo = Literal["ingreso", "egreso"]
MarcoTemporal = Literal["diario", "semanal", "mensual", "rango"]
ClaseFecha = Literal["fecha", "fecha_hora", "epoch_segundos", "epoch_milisegundos"]

TIPOS: tuple[str, ...] = ("ingreso", "egreso")
MARCOS: tuple[str, ...] = ("diario", "semanal", "mensual", "rango")


@dataclass(frozen=True)
class FechaCruda:
    """Forma en la que llegó la fecha desde la fuente, antes de resolverla."""
    clase: ClaseFecha
    valor: object


@dataclass(frozen=True)
class Movimiento:
    id: str
    concepto: str
    monto: float
    fecha: datetime | None   # None si la fecha original no se pudo interpretar
    tipo: Tipo
    usuario: str | None = None
    fecha_cruda: object = None


@dataclass
class Balde:
    ingresos: float = 0.0
    egresos: float = 0.0

    @property
    def neto(self) -> float:
        return self.ingresos - self.egresos


@dataclass(frozen=True)
class ResumenReporte:
    etiquetas: list[str] = field(default_factory=list)
    ingresos: list[float] = field(default_factory=list)
    egresos: list[float] = field(default_factory=list)
    promedio: float = 0.0


@dataclass(frozen=True)
class Sesion:
    user_id: str
    rol: str = "user"   # "user" o "admin"

    @property
    def es_admin(self) -> bool:
        return self.rol == "admin"
