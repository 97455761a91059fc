import pytest

from logic.altas import preparar_alta_movimiento
from logic.modelos import Sesion


ADMIN = Sesion(user_id="admin-1", rol="admin")
USUARIO = Sesion(user_id="u-1")


def test_alta_valida():
    variables = preparar_alta_movimiento(USUARIO, "u-1", " Venta ", "150,50", "2024-03-01", "Ingreso")
    assert variables == {
        "userId": "u-1",
        "concepto": "Venta",
        "monto": 150.5,
        "fecha": "2024-03-01 00:00:00",
        "tipo": "ingreso",
    }


def test_admin_puede_crear_para_otros():
    variables = preparar_alta_movimiento(ADMIN, "u-1", "Ajuste", 10, "2024-03-01", "egreso")
    assert variables["userId"] == "u-1"


def test_sin_sesion():
    with pytest.raises(PermissionError, match="No autenticado"):
        preparar_alta_movimiento(None, "u-1", "Venta", 1, "2024-03-01", "ingreso")


def test_usuario_no_puede_crear_para_otros():
    with pytest.raises(PermissionError, match="otros usuarios"):
        preparar_alta_movimiento(USUARIO, "u-2", "Venta", 1, "2024-03-01", "ingreso")


@pytest.mark.parametrize("monto", ["abc", "", None, "nan"])
def test_monto_invalido(monto):
    with pytest.raises(ValueError, match="El monto debe ser un número válido."):
        preparar_alta_movimiento(USUARIO, "u-1", "Venta", monto, "2024-03-01", "ingreso")


def test_tipo_invalido():
    with pytest.raises(ValueError):
        preparar_alta_movimiento(USUARIO, "u-1", "Venta", 1, "2024-03-01", "transferencia")


def test_fecha_invalida_y_concepto_vacio():
    with pytest.raises(ValueError):
        preparar_alta_movimiento(USUARIO, "u-1", "Venta", 1, "31/02/2024", "ingreso")
    with pytest.raises(ValueError):
        preparar_alta_movimiento(USUARIO, "u-1", "  ", 1, "2024-03-01", "ingreso")
