from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable

from logic.fechas import parsear_dia
from logic.modelos import MARCOS, Movimiento


MAX_DIAS_RANGO = 92

MSG_RANGO_EXCEDIDO = "El rango no debe ser mayor a 3 meses."
MSG_FIN_ANTERIOR = "La fecha final no puede ser anterior a la fecha inicial."
MSG_FECHA_INVALIDA = "Fecha inválida en el rango."


def inicio_semana(hoy: date) -> date:
    """Domingo de la semana que contiene `hoy` (domingo = día 0)."""
    return hoy - timedelta(days=(hoy.weekday() + 1) % 7)


def _dia_completo(desde: date, hasta: date) -> tuple[datetime, datetime]:
    return datetime.combine(desde, time.min), datetime.combine(hasta, time.max)


def ventana(
    marco: str,
    ahora: datetime | None = None,
    inicio: object = None,
    fin: object = None,
) -> tuple[datetime, datetime] | None:
    """
    Límites inclusivos [desde, hasta] del marco temporal, en hora local.

    Para "rango" devuelve None si falta alguno de los límites o no es una
    fecha YYYY-MM-DD válida.
    """
    hoy = (ahora or datetime.now()).date()

    if marco == "diario":
        return _dia_completo(hoy, hoy)
    if marco == "semanal":
        domingo = inicio_semana(hoy)
        return _dia_completo(domingo, domingo + timedelta(days=6))
    if marco == "mensual":
        ultimo = calendar.monthrange(hoy.year, hoy.month)[1]
        return _dia_completo(hoy.replace(day=1), hoy.replace(day=ultimo))
    if marco == "rango":
        desde, hasta = parsear_dia(inicio), parsear_dia(fin)
        if desde is None or hasta is None:
            return None
        return _dia_completo(desde, hasta)
    raise ValueError(f"Marco temporal desconocido: {marco!r}. Opciones: {MARCOS}")


def en_ventana(
    mov: Movimiento,
    marco: str,
    ahora: datetime | None = None,
    inicio: object = None,
    fin: object = None,
) -> bool:
    limites = ventana(marco, ahora, inicio, fin)
    if limites is None or mov.fecha is None:
        return False
    return limites[0] <= mov.fecha <= limites[1]


def filtrar_por_marco(
    movimientos: Iterable[Movimiento],
    marco: str,
    ahora: datetime | None = None,
    inicio: object = None,
    fin: object = None,
) -> list[Movimiento]:
    """Movimientos cuya fecha cae dentro del marco. Los que no tienen fecha quedan afuera."""
    limites = ventana(marco, ahora, inicio, fin)
    if limites is None:
        return []
    desde, hasta = limites
    return [m for m in movimientos if m.fecha is not None and desde <= m.fecha <= hasta]


def validar_rango(inicio: object, fin: object, max_dias: int = MAX_DIAS_RANGO) -> str:
    """Mensaje de validación del rango personalizado; cadena vacía si es válido."""
    if not inicio or not fin:
        return ""
    desde, hasta = parsear_dia(inicio), parsear_dia(fin)
    if desde is None or hasta is None:
        return MSG_FECHA_INVALIDA

    if (hasta - desde).days > max_dias:
        return MSG_RANGO_EXCEDIDO
    if hasta < desde:
        return MSG_FIN_ANTERIOR
    return ""
