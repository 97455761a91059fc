from __future__ import annotations

import math
from datetime import datetime

from logic.fechas import normalizar_fecha
from logic.modelos import TIPOS, Sesion


def _monto_a_float(monto: object) -> float:
    try:
        valor = float(str(monto).strip().replace(",", "."))
    except ValueError:
        raise ValueError("El monto debe ser un número válido.")
    if math.isnan(valor) or math.isinf(valor):
        raise ValueError("El monto debe ser un número válido.")
    return valor


def preparar_alta_movimiento(
    sesion: Sesion | None,
    user_id: str,
    concepto: str,
    monto: object,
    fecha: object,
    tipo: str,
) -> dict:
    """
    Valida un movimiento nuevo y devuelve las variables para la mutación de alta.

    Solo un administrador puede crear movimientos a nombre de otro usuario.
    La fecha de un input de tipo fecha (YYYY-MM-DD) se guarda como medianoche local.
    """
    if sesion is None:
        raise PermissionError("No autenticado")
    if not sesion.es_admin and sesion.user_id != user_id:
        raise PermissionError("No autorizado para crear movimientos para otros usuarios")

    concepto = (concepto or "").strip()
    if not concepto:
        raise ValueError("El concepto es obligatorio.")

    monto_float = _monto_a_float(monto)

    tipo = (tipo or "").strip().lower()
    if tipo not in TIPOS:
        raise ValueError(f"Tipo de movimiento inválido: {tipo!r}. Opciones: {TIPOS}")

    fecha_dt: datetime | None = normalizar_fecha(fecha)
    if fecha_dt is None:
        raise ValueError("La fecha del movimiento no es válida.")

    return {
        "userId": user_id,
        "concepto": concepto,
        "monto": monto_float,
        "fecha": fecha_dt.isoformat(sep=" ", timespec="seconds"),
        "tipo": tipo,
    }
