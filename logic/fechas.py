from __future__ import annotations

import math
import re
from datetime import date, datetime
from numbers import Real

from logic.modelos import FechaCruda


UMBRAL_EPOCH_SEGUNDOS = 10_000_000_000

_SOLO_FECHA = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CON_ZONA = re.compile(r"(Z|[+-]\d{2}:?\d{2})$")


def offset_local(ahora: datetime | None = None) -> str:
    """Offset UTC de la máquina como `±HH:MM`, calculado al momento de la llamada."""
    ref = (ahora or datetime.now()).astimezone()
    minutos = int(ref.utcoffset().total_seconds() // 60)
    signo = "+" if minutos >= 0 else "-"
    minutos = abs(minutos)
    return f"{signo}{minutos // 60:02d}:{minutos % 60:02d}"


def _clasificar_numero(numero: float, umbral: int) -> FechaCruda | None:
    if math.isnan(numero) or math.isinf(numero) or numero == 0:
        return None
    clase = "epoch_segundos" if numero < umbral else "epoch_milisegundos"
    return FechaCruda(clase, numero)


def clasificar_fecha(valor: object, umbral: int = UMBRAL_EPOCH_SEGUNDOS) -> FechaCruda | None:
    """
    Identifica la forma de una fecha tal como la devuelve la fuente.

    Orden de prioridad:
      1. "YYYY-MM-DD"                  -> fecha
      2. texto con '-' y ':'           -> fecha_hora ("YYYY-MM-DD HH:mm:ss")
      3. número (o texto numérico)     -> epoch en segundos si es menor a `umbral`,
                                          si no en milisegundos
    Devuelve None si no encaja en ninguna forma.
    """
    if valor is None or isinstance(valor, bool):
        return None
    if isinstance(valor, datetime):
        return FechaCruda("fecha_hora", valor)
    if isinstance(valor, date):
        return FechaCruda("fecha", valor)
    if isinstance(valor, Real):
        return _clasificar_numero(float(valor), umbral)
    if not isinstance(valor, str):
        return None

    texto = valor.strip()
    if not texto:
        return None
    if _SOLO_FECHA.match(texto):
        return FechaCruda("fecha", texto)
    if "-" in texto and ":" in texto:
        return FechaCruda("fecha_hora", texto)
    try:
        numero = float(texto)
    except ValueError:
        return None
    return _clasificar_numero(numero, umbral)


def _resolver_fecha_hora(valor: object, ahora: datetime | None) -> datetime | None:
    if isinstance(valor, datetime):
        if valor.tzinfo is not None:
            valor = valor.astimezone()
        return datetime.combine(valor.date(), valor.time())

    texto = str(valor).strip().replace("T", " ", 1)
    parte_fecha, _, parte_hora = texto.partition(" ")
    parte_hora = parte_hora.strip()
    if parte_hora.endswith("Z"):
        parte_hora = parte_hora[:-1] + "+00:00"
    elif not _CON_ZONA.search(parte_hora):
        parte_hora += offset_local(ahora)
    try:
        instante = datetime.fromisoformat(f"{parte_fecha}T{parte_hora}")
    except ValueError:
        return None
    return instante.astimezone().replace(tzinfo=None)


def resolver_fecha(cruda: FechaCruda | None, ahora: datetime | None = None) -> datetime | None:
    """Convierte una FechaCruda en un datetime local (naive). None si no es válida."""
    if cruda is None:
        return None

    if cruda.clase == "fecha":
        if isinstance(cruda.valor, date):
            return datetime(cruda.valor.year, cruda.valor.month, cruda.valor.day)
        anio, mes, dia = (int(p) for p in str(cruda.valor).split("-"))
        try:
            return datetime(anio, mes, dia)
        except ValueError:
            return None

    if cruda.clase == "fecha_hora":
        return _resolver_fecha_hora(cruda.valor, ahora)

    milisegundos = float(cruda.valor)
    if cruda.clase == "epoch_segundos":
        milisegundos *= 1000
    try:
        return datetime.fromtimestamp(milisegundos / 1000)
    except (OverflowError, OSError, ValueError):
        return None


def normalizar_fecha(
    valor: object,
    ahora: datetime | None = None,
    umbral: int = UMBRAL_EPOCH_SEGUNDOS,
) -> datetime | None:
    return resolver_fecha(clasificar_fecha(valor, umbral), ahora)


def etiqueta_fecha(fecha: datetime) -> str:
    """Etiqueta de día calendario local, YYYY-MM-DD."""
    return fecha.date().isoformat()


def formatear_fecha(fecha: datetime | None, formato: str = "%d/%m/%Y") -> str:
    if fecha is None:
        return ""
    return fecha.strftime(formato)


def parsear_dia(valor: object) -> date | None:
    """Día calendario a partir de "YYYY-MM-DD" (o de un date ya construido)."""
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    if not isinstance(valor, str) or not _SOLO_FECHA.match(valor.strip()):
        return None
    anio, mes, dia = (int(p) for p in valor.strip().split("-"))
    try:
        return date(anio, mes, dia)
    except ValueError:
        return None
