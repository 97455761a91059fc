from __future__ import annotations
import io
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable

import pandas as pd

from infra.logger import get_logger
from logic.filtros import MAX_DIAS_RANGO, validar_rango
from logic.modelos import Movimiento
from logic.snapshots import (
    COLUMNA_VENTANA,
    COLUMNAS,
    filas_tres_ventanas_csv,
    snapshot_seleccionado,
    snapshot_tres_ventanas,
)


log = get_logger()

ARCHIVO_SELECCIONADO = "movimientos_seleccionado"
ARCHIVO_TRES_HOJAS = "movimientos_tresHojas"

FORMATO_FECHA = "%d/%m/%Y"
FORMATO_MONTO = "#,##0.00"
HOJA_SELECCIONADO = "Seleccionado"

MIME = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv;charset=utf-8",
}


@dataclass(frozen=True)
class Descarga:
    nombre: str
    contenido: bytes | str
    mime: str


def hojas_a_excel_bytes(
    hojas: dict[str, list[dict]],
    formato_monto: str | None = None,
) -> bytes:
    """
    Escribe cada hoja {nombre: filas} en un libro xlsx en memoria.
    Si se pasa `formato_monto` (ej. "#,##0.00") se aplica como number_format a la columna Monto.
    """
    buff = io.BytesIO()
    with pd.ExcelWriter(buff, engine="openpyxl") as writer:
        for sheet_name, filas in hojas.items():
            df = pd.DataFrame(filas, columns=COLUMNAS)
            df.to_excel(writer, index=False, sheet_name=sheet_name)
            if formato_monto:
                ws = writer.sheets[sheet_name]
                headers = [c.value for c in ws[1]]
                if "Monto" in headers:
                    col_letter = ws.cell(row=1, column=headers.index("Monto") + 1).column_letter
                    for cell in ws[col_letter][1:]:
                        cell.number_format = formato_monto
    return buff.getvalue()


def filas_a_csv_texto(filas: list[dict], columnas: list[str] | None = None) -> str:
    """CSV con encabezado; sin filas devuelve solo el encabezado."""
    df = pd.DataFrame(filas, columns=columnas or COLUMNAS)
    return df.to_csv(index=False)


def _validar_formato(formato: str) -> None:
    if formato not in MIME:
        raise ValueError(f"Formato de exportación desconocido: {formato!r}. Opciones: {list(MIME)}")


def construir_descarga_seleccionada(
    movimientos: Iterable[Movimiento] | None,
    marco: str,
    formato: str = "xlsx",
    ahora: datetime | None = None,
    inicio: object = None,
    fin: object = None,
    *,
    max_dias_rango: int = MAX_DIAS_RANGO,
    formato_fecha: str = FORMATO_FECHA,
    formato_monto: str | None = FORMATO_MONTO,
    hoja: str = HOJA_SELECCIONADO,
) -> Descarga | None:
    """
    Exportación según el marco seleccionado (incluye "rango").
    Devuelve None si todavía no hay datos o si el rango no es válido.
    """
    _validar_formato(formato)
    if movimientos is None:
        log.info("Exportación omitida: no hay movimientos cargados")
        return None
    if marco == "rango":
        error = validar_rango(inicio, fin, max_dias_rango)
        if error:
            log.warning("Exportación omitida: %s", error)
            return None

    filas = snapshot_seleccionado(
        movimientos, marco, ahora, inicio, fin, formato_fecha=formato_fecha
    )
    if formato == "xlsx":
        contenido = hojas_a_excel_bytes({hoja: filas}, formato_monto)
    else:
        contenido = filas_a_csv_texto(filas)
    log.info("Exportación seleccionada (%s, %s): %d filas", marco, formato, len(filas))
    return Descarga(f"{ARCHIVO_SELECCIONADO}.{formato}", contenido, MIME[formato])


def construir_descarga_tres_hojas(
    movimientos: Iterable[Movimiento] | None,
    formato: str = "xlsx",
    ahora: datetime | None = None,
    *,
    formato_fecha: str = FORMATO_FECHA,
    formato_monto: str | None = FORMATO_MONTO,
) -> Descarga | None:
    """
    Exportación fija Diario / Semanal / Mensual, sin importar el marco seleccionado.
    En xlsx una hoja por ventana (las vacías se omiten); en csv filas concatenadas
    con la columna Ventana.
    """
    _validar_formato(formato)
    if movimientos is None:
        log.info("Exportación omitida: no hay movimientos cargados")
        return None

    if formato == "xlsx":
        hojas = snapshot_tres_ventanas(movimientos, ahora, formato_fecha)
        if not hojas:
            log.info("Exportación de tres hojas omitida: ninguna ventana tiene movimientos")
            return None
        contenido = hojas_a_excel_bytes(hojas, formato_monto)
        log.info("Exportación tres hojas (xlsx): %s", {k: len(v) for k, v in hojas.items()})
    else:
        filas = filas_tres_ventanas_csv(movimientos, ahora, formato_fecha)
        contenido = filas_a_csv_texto(filas, COLUMNAS + [COLUMNA_VENTANA])
        log.info("Exportación tres hojas (csv): %d filas", len(filas))
    return Descarga(f"{ARCHIVO_TRES_HOJAS}.{formato}", contenido, MIME[formato])


def guardar_descarga(descarga: Descarga, directorio: str | Path = ".") -> Path:
    """Guarda la descarga en disco con su nombre sugerido y devuelve la ruta."""
    destino = Path(directorio) / descarga.nombre
    destino.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(descarga.contenido, bytes):
        destino.write_bytes(descarga.contenido)
    else:
        destino.write_text(descarga.contenido, encoding="utf-8")
    log.info("Archivo guardado: %s", destino)
    return destino
