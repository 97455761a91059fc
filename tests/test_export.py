import io
from datetime import datetime

import pandas as pd
import pytest
from openpyxl import load_workbook

from infra.export import (
    construir_descarga_seleccionada,
    construir_descarga_tres_hojas,
    filas_a_csv_texto,
    guardar_descarga,
    hojas_a_excel_bytes,
)
from logic.modelos import Movimiento


AHORA = datetime(2024, 3, 20, 12, 0)


@pytest.fixture
def movimientos():
    return [
        Movimiento("hoy", "Venta", 1234.5, datetime(2024, 3, 20, 9), "ingreso"),
        Movimiento("hace10", "Luz", 40.0, datetime(2024, 3, 10, 9), "egreso"),
        Movimiento("mesPasado", "Alquiler", 500.0, datetime(2024, 2, 20, 9), "egreso"),
        Movimiento("roto", "Sin fecha", 1.0, None, "egreso"),
    ]


def test_hojas_a_excel_bytes_con_formato_de_monto():
    filas = [{"ID": "1", "Concepto": "Venta", "Monto": 10.5, "Fecha": "01/03/2024", "Tipo": "ingreso"}]
    contenido = hojas_a_excel_bytes({"Hoja": filas}, formato_monto="#,##0.00")
    ws = load_workbook(io.BytesIO(contenido))["Hoja"]
    assert [c.value for c in ws[1]] == ["ID", "Concepto", "Monto", "Fecha", "Tipo"]
    assert ws["C2"].value == 10.5
    assert ws["C2"].number_format == "#,##0.00"


def test_csv_vacio_solo_encabezado():
    assert filas_a_csv_texto([]).strip() == "ID,Concepto,Monto,Fecha,Tipo"


def test_descarga_seleccionada_xlsx(movimientos):
    descarga = construir_descarga_seleccionada(movimientos, "mensual", "xlsx", AHORA)
    assert descarga.nombre == "movimientos_seleccionado.xlsx"
    hojas = pd.read_excel(io.BytesIO(descarga.contenido), sheet_name=None, dtype=str)
    assert list(hojas) == ["Seleccionado"]
    assert hojas["Seleccionado"]["ID"].tolist() == ["hoy", "hace10"]
    assert hojas["Seleccionado"]["Fecha"].tolist() == ["20/03/2024", "10/03/2024"]


def test_descarga_seleccionada_csv_con_rango(movimientos):
    descarga = construir_descarga_seleccionada(
        movimientos, "rango", "csv", AHORA, inicio="2024-02-01", fin="2024-02-29"
    )
    assert descarga.nombre == "movimientos_seleccionado.csv"
    df = pd.read_csv(io.StringIO(descarga.contenido), dtype=str)
    assert df["ID"].tolist() == ["mesPasado"]


def test_descarga_seleccionada_con_rango_invalido_no_hace_nada(movimientos):
    assert construir_descarga_seleccionada(
        movimientos, "rango", "xlsx", AHORA, inicio="2024-01-01", fin="2024-05-01"
    ) is None
    assert construir_descarga_seleccionada(
        movimientos, "rango", "csv", AHORA, inicio="2024-03-10", fin="2024-03-01"
    ) is None


def test_sin_datos_cargados_no_hace_nada():
    assert construir_descarga_seleccionada(None, "diario", "xlsx", AHORA) is None
    assert construir_descarga_tres_hojas(None, "csv", AHORA) is None


def test_formato_desconocido():
    with pytest.raises(ValueError):
        construir_descarga_seleccionada([], "diario", "pdf", AHORA)


def test_tres_hojas_xlsx(movimientos):
    descarga = construir_descarga_tres_hojas(movimientos, "xlsx", AHORA)
    assert descarga.nombre == "movimientos_tresHojas.xlsx"
    hojas = pd.read_excel(io.BytesIO(descarga.contenido), sheet_name=None, dtype=str)
    assert list(hojas) == ["Diario", "Semanal", "Mensual"]
    assert len(hojas["Diario"]) == 1
    assert len(hojas["Mensual"]) == 2


def test_tres_hojas_xlsx_sin_movimientos_en_ninguna_ventana():
    viejos = [Movimiento("1", "Viejo", 1.0, datetime(2023, 1, 1), "ingreso")]
    assert construir_descarga_tres_hojas(viejos, "xlsx", AHORA) is None


def test_tres_hojas_csv(movimientos):
    descarga = construir_descarga_tres_hojas(movimientos, "csv", AHORA)
    assert descarga.nombre == "movimientos_tresHojas.csv"
    df = pd.read_csv(io.StringIO(descarga.contenido), dtype=str)
    assert df.columns.tolist() == ["ID", "Concepto", "Monto", "Fecha", "Tipo", "Ventana"]
    assert df["Ventana"].tolist() == ["Diario", "Semanal", "Mensual", "Mensual"]


def test_guardar_descarga(tmp_path, movimientos):
    xlsx = construir_descarga_seleccionada(movimientos, "diario", "xlsx", AHORA)
    csv = construir_descarga_seleccionada(movimientos, "diario", "csv", AHORA)
    ruta_xlsx = guardar_descarga(xlsx, tmp_path)
    ruta_csv = guardar_descarga(csv, tmp_path / "salida")
    assert ruta_xlsx.name == "movimientos_seleccionado.xlsx"
    assert ruta_xlsx.read_bytes() == xlsx.contenido
    assert ruta_csv.read_text(encoding="utf-8") == csv.contenido


def test_descarga_seleccionada_con_parametros_propios(movimientos):
    descarga = construir_descarga_seleccionada(
        movimientos, "mensual", "xlsx", AHORA,
        formato_fecha="%Y/%m/%d", formato_monto="0.0", hoja="Marzo",
    )
    ws = load_workbook(io.BytesIO(descarga.contenido))["Marzo"]
    assert ws["D2"].value == "2024/03/20"
    assert ws["C2"].number_format == "0.0"


def test_max_dias_rango_por_parametro(movimientos):
    args = (movimientos, "rango", "csv", AHORA, "2024-02-01", "2024-03-15")
    assert construir_descarga_seleccionada(*args) is not None
    assert construir_descarga_seleccionada(*args, max_dias_rango=30) is None


def test_tres_hojas_con_formato_de_fecha_propio(movimientos):
    descarga = construir_descarga_tres_hojas(movimientos, "csv", AHORA, formato_fecha="%Y-%m-%d")
    df = pd.read_csv(io.StringIO(descarga.contenido), dtype=str)
    assert df["Fecha"].tolist()[0] == "2024-03-20"
