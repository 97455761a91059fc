from __future__ import annotations

import json
import math
from pathlib import Path
from typing import BinaryIO, TextIO, Union

import pandas as pd

from infra.logger import get_logger
from logic.fechas import UMBRAL_EPOCH_SEGUNDOS, normalizar_fecha
from logic.modelos import TIPOS, Movimiento


log = get_logger()


class ErrorConsulta(Exception):
    """Error devuelto por la capa de consultas; el mensaje se muestra tal cual."""


def _vacio(valor: object) -> bool:
    if valor is None:
        return True
    if isinstance(valor, float) and math.isnan(valor):
        return True
    return isinstance(valor, str) and not valor.strip()


def _nombre_usuario(valor: object) -> str | None:
    if isinstance(valor, dict):
        valor = valor.get("name")
    if _vacio(valor):
        return None
    return str(valor).strip()


def movimiento_desde_registro(registro: dict, umbral: int = UMBRAL_EPOCH_SEGUNDOS) -> Movimiento | None:
    """
    Convierte un registro de la consulta `movements` en un Movimiento.

    La fecha se normaliza una sola vez acá; si no se puede interpretar el
    movimiento se conserva con fecha=None. Registros con tipo desconocido o
    monto no numérico o infinito se descartan, igual que los registros que no
    son un objeto.
    """
    if not isinstance(registro, dict):
        log.warning("Registro descartado: se esperaba un objeto, llegó %r", registro)
        return None

    tipo = str(registro.get("tipo") or "").strip().lower()
    if tipo not in TIPOS:
        log.warning("Movimiento %s descartado: tipo desconocido %r", registro.get("id"), registro.get("tipo"))
        return None

    monto_raw = registro.get("monto")
    try:
        monto = float(monto_raw)
    except (TypeError, ValueError):
        log.warning("Movimiento %s descartado: monto inválido %r", registro.get("id"), monto_raw)
        return None
    if not math.isfinite(monto):
        log.warning("Movimiento %s descartado: monto no finito %r", registro.get("id"), monto_raw)
        return None

    fecha_raw = registro.get("fecha")
    fecha = normalizar_fecha(fecha_raw, umbral=umbral)

    usuario = registro.get("user", registro.get("usuario"))
    return Movimiento(
        id=str(registro.get("id") or ""),
        concepto=str(registro.get("concepto") or ""),
        monto=monto,
        fecha=fecha,
        tipo=tipo,
        usuario=_nombre_usuario(usuario),
        fecha_cruda=fecha_raw,
    )


def _registros(payload: object) -> list:
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        raise ValueError(f"Respuesta de consulta no soportada: {type(payload).__name__}")

    errores = payload.get("errors")
    if errores:
        mensajes = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errores]
        raise ErrorConsulta("; ".join(mensajes))

    data = payload.get("data", payload) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Campo data no soportado: {type(data).__name__}")
    registros = data.get("movements") or []
    if not isinstance(registros, list):
        raise ValueError(f"Campo movements no soportado: {type(registros).__name__}")
    return registros


def cargar_movimientos(payload: object, umbral: int = UMBRAL_EPOCH_SEGUNDOS) -> list[Movimiento]:
    """
    Acepta una respuesta GraphQL, {"movements": [...]} o una lista de registros.
    Un payload con otra forma levanta ValueError.
    """
    registros = _registros(payload)
    out: list[Movimiento] = []
    for r in registros:
        m = movimiento_desde_registro(r, umbral)
        if m is not None:
            out.append(m)

    sin_fecha = sum(1 for m in out if m.fecha is None)
    log.info(
        "Movimientos cargados: %d (descartados: %d, sin fecha válida: %d)",
        len(out), len(registros) - len(out), sin_fecha,
    )
    return out


def _nombre_archivo(path_or_file: Union[str, Path, TextIO, BinaryIO]) -> str:
    if isinstance(path_or_file, (str, Path)):
        return str(path_or_file)
    return str(getattr(path_or_file, "name", ""))


def leer_movimientos_archivo(
    path_or_file: Union[str, Path, TextIO, BinaryIO],
    umbral: int = UMBRAL_EPOCH_SEGUNDOS,
) -> list[Movimiento]:
    """
    Carga movimientos desde un export en disco o en memoria (Streamlit UploadedFile).

    CSV: una fila por movimiento con columnas id, concepto, monto, fecha, tipo
    y opcionalmente user/usuario. JSON: respuesta GraphQL o lista de registros.
    """
    nombre = _nombre_archivo(path_or_file).lower()

    if not isinstance(path_or_file, (str, Path)):
        try:
            path_or_file.seek(0)
        except Exception:
            pass

    if nombre.endswith(".csv"):
        df = pd.read_csv(path_or_file, dtype=str, keep_default_na=False, encoding="utf-8-sig")
        df.columns = [str(c).strip().lower() for c in df.columns]
        return cargar_movimientos(df.to_dict(orient="records"), umbral)

    if isinstance(path_or_file, (str, Path)):
        with open(path_or_file, "r", encoding="utf-8-sig") as f:
            payload = json.load(f)
    else:
        contenido = path_or_file.read()
        if isinstance(contenido, bytes):
            contenido = contenido.decode("utf-8-sig")
        payload = json.loads(contenido)
    return cargar_movimientos(payload, umbral)
