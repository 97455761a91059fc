from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Iterable

from logic.fechas import etiqueta_fecha
from logic.filtros import filtrar_por_marco
from logic.modelos import Balde, Movimiento, ResumenReporte


COLOR_INGRESOS = ("rgba(0, 128, 0, 0.7)", "green")
COLOR_EGRESOS = ("rgba(255, 0, 0, 0.7)", "red")


def agrupar_por_fecha(movimientos: Iterable[Movimiento]) -> dict[str, Balde]:
    """Un balde por día calendario (YYYY-MM-DD) con la suma de ingresos y egresos."""
    baldes: dict[str, Balde] = defaultdict(Balde)
    for m in movimientos:
        if m.fecha is None:
            continue
        balde = baldes[etiqueta_fecha(m.fecha)]
        if m.tipo == "ingreso":
            balde.ingresos += m.monto
        else:
            balde.egresos += m.monto
    return dict(baldes)


def agregar_por_fecha(movimientos: Iterable[Movimiento]) -> ResumenReporte:
    """
    Series por fecha para el gráfico y promedio del neto diario.

    El promedio es la suma de los netos (ingresos - egresos) dividida por la
    cantidad de días con al menos un movimiento; sin días, el promedio es 0.
    """
    baldes = agrupar_por_fecha(movimientos)
    etiquetas = sorted(baldes)
    netos = [baldes[e].neto for e in etiquetas]
    promedio = sum(netos) / len(etiquetas) if etiquetas else 0.0

    return ResumenReporte(
        etiquetas=etiquetas,
        ingresos=[baldes[e].ingresos for e in etiquetas],
        egresos=[baldes[e].egresos for e in etiquetas],
        promedio=promedio,
    )


def recalcular_reporte(
    movimientos: Iterable[Movimiento],
    marco: str,
    ahora: datetime | None = None,
    inicio: object = None,
    fin: object = None,
) -> ResumenReporte:
    """Filtra por marco y agrega. Se invoca cada vez que cambia la lista, el marco o el rango."""
    return agregar_por_fecha(filtrar_por_marco(movimientos, marco, ahora, inicio, fin))


def datos_grafico(resumen: ResumenReporte) -> dict:
    """Estructura {labels, datasets} para un gráfico de barras Ingresos vs Egresos."""
    def dataset(label: str, data: list[float], colores: tuple[str, str]) -> dict:
        fondo, borde = colores
        return {
            "label": label,
            "data": list(data),
            "backgroundColor": fondo,
            "borderColor": borde,
            "borderWidth": 1,
        }

    return {
        "labels": list(resumen.etiquetas),
        "datasets": [
            dataset("Ingresos", resumen.ingresos, COLOR_INGRESOS),
            dataset("Egresos", resumen.egresos, COLOR_EGRESOS),
        ],
    }
