from __future__ import annotations

from datetime import datetime
from typing import Iterable

from logic.fechas import formatear_fecha
from logic.filtros import filtrar_por_marco
from logic.modelos import Movimiento


COLUMNAS = ["ID", "Concepto", "Monto", "Fecha", "Tipo"]
COLUMNA_VENTANA = "Ventana"

# Hoja -> marco fijo. El rango personalizado nunca entra en esta exportación.
VENTANAS_FIJAS = {
    "Diario": "diario",
    "Semanal": "semanal",
    "Mensual": "mensual",
}


def filas_exportacion(movimientos: Iterable[Movimiento], formato_fecha: str = "%d/%m/%Y") -> list[dict]:
    """Una fila plana por movimiento, lista para hoja de cálculo o CSV."""
    return [
        {
            "ID": m.id,
            "Concepto": m.concepto,
            "Monto": m.monto,
            "Fecha": formatear_fecha(m.fecha, formato_fecha),
            "Tipo": m.tipo,
        }
        for m in movimientos
    ]


def snapshot_seleccionado(
    movimientos: Iterable[Movimiento],
    marco: str,
    ahora: datetime | None = None,
    inicio: object = None,
    fin: object = None,
    formato_fecha: str = "%d/%m/%Y",
) -> list[dict]:
    return filas_exportacion(filtrar_por_marco(movimientos, marco, ahora, inicio, fin), formato_fecha)


def snapshot_tres_ventanas(
    movimientos: Iterable[Movimiento],
    ahora: datetime | None = None,
    formato_fecha: str = "%d/%m/%Y",
) -> dict[str, list[dict]]:
    """
    Hojas Diario, Semanal y Mensual calculadas de forma independiente.
    Las hojas sin filas se omiten.
    """
    movimientos = list(movimientos)
    ahora = ahora or datetime.now()
    hojas: dict[str, list[dict]] = {}
    for hoja, marco in VENTANAS_FIJAS.items():
        filas = snapshot_seleccionado(movimientos, marco, ahora, formato_fecha=formato_fecha)
        if filas:
            hojas[hoja] = filas
    return hojas


def filas_tres_ventanas_csv(
    movimientos: Iterable[Movimiento],
    ahora: datetime | None = None,
    formato_fecha: str = "%d/%m/%Y",
) -> list[dict]:
    """Las tres ventanas concatenadas, cada fila marcada con el nombre de su ventana."""
    filas: list[dict] = []
    for hoja, filas_hoja in snapshot_tres_ventanas(movimientos, ahora, formato_fecha).items():
        filas.extend({**fila, COLUMNA_VENTANA: hoja} for fila in filas_hoja)
    return filas
