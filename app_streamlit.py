from datetime import date, datetime, timedelta

import pandas as pd
import streamlit as st

from infra.config import load_config
from infra.export import construir_descarga_seleccionada, construir_descarga_tres_hojas
from infra.logger import get_logger
from infra.loader_movimientos import ErrorConsulta, leer_movimientos_archivo, movimiento_desde_registro
from logic.altas import preparar_alta_movimiento
from logic.fechas import formatear_fecha
from logic.filtros import validar_rango
from logic.modelos import MARCOS, Sesion
from logic.reportes import datos_grafico, recalcular_reporte

# =========================
# Configuración inicial
# =========================
cfg = load_config()
get_logger(level=cfg.app.log_level)
st.set_page_config(page_title=cfg.app.title, layout=cfg.app.page_layout)
st.title(cfg.app.title)

ETIQUETAS_MARCO = {"diario": "Diario", "semanal": "Semanal", "mensual": "Mensual", "rango": "Rango"}

# =========================
# Instrucciones
# =========================
with st.expander("ℹ️ Cómo usar el reporte de movimientos"):
    st.markdown("""
    ### 📂 Paso 1: Cargar movimientos
    - Export de la consulta `movements` en **JSON** (respuesta GraphQL o lista) o **CSV**.
    - Columnas: id, concepto, monto, fecha, tipo (ingreso/egreso) y opcionalmente user.

    ### 📅 Paso 2: Rango de tiempo
    - **Diario**, **Semanal** (domingo a sábado), **Mensual** o **Rango** personalizado (máximo 3 meses).

    ### 📊 Paso 3: Gráfico
    - Ingresos vs Egresos por día y promedio del neto diario.

    ### 💾 Paso 4: Descargas
    - Según el filtro seleccionado, o las tres ventanas fijas (Diario, Semanal y Mensual).
    """)

# =========================
# Carga de movimientos
# =========================
archivo = st.file_uploader("Movimientos (JSON/CSV)", type=["json", "csv"], key="archivo_movimientos")

if "movimientos_nuevos" not in st.session_state:
    st.session_state["movimientos_nuevos"] = []

movimientos = None
if archivo is not None:
    try:
        movimientos = leer_movimientos_archivo(archivo, cfg.reportes.umbral_epoch_segundos) + st.session_state["movimientos_nuevos"]
    except ErrorConsulta as e:
        st.error(f"Error al cargar movimientos: {e}")
    except ValueError as e:
        st.error(f"❌ No se pudo leer {archivo.name}: {e}")

if movimientos is None:
    st.info("Cargá un archivo de movimientos para ver el reporte.")
    st.stop()

# =========================
# Filtro de tiempo
# =========================
col_f1, col_f2, col_f3 = st.columns(3)

with col_f1:
    marco = st.selectbox(
        "Selecciona el rango de tiempo",
        MARCOS,
        index=MARCOS.index(cfg.reportes.marco_por_defecto),
        format_func=ETIQUETAS_MARCO.get,
        key="marco",
    )

inicio = fin = None
error_rango = ""
if marco == "rango":
    hoy = date.today()
    with col_f2:
        inicio = st.date_input("Fecha Inicial", value=hoy - timedelta(days=30), key="inicio")
    with col_f3:
        fin = st.date_input("Fecha Final", value=hoy, key="fin")
    error_rango = validar_rango(inicio, fin, cfg.reportes.max_dias_rango)
    if error_rango:
        st.error(error_rango)

# =========================
# Gráfico y promedio
# =========================
ahora = datetime.now()
resumen = recalcular_reporte(movimientos, marco, ahora, inicio, fin)
grafico = datos_grafico(resumen)

st.subheader("Ingresos vs Egresos")
if grafico["labels"]:
    df_grafico = pd.DataFrame(
        {ds["label"]: ds["data"] for ds in grafico["datasets"]},
        index=grafico["labels"],
    )
    st.bar_chart(df_grafico)
else:
    st.info("No hay movimientos en el rango seleccionado.")

st.markdown(f"### Promedio: ${resumen.promedio:.2f}")

# =========================
# Tabla de movimientos
# =========================
with st.expander("Movimientos cargados"):
    if not movimientos:
        st.write("No hay movimientos")
    else:
        st.dataframe(
            pd.DataFrame([
                {
                    "Concepto": m.concepto,
                    "Monto": m.monto,
                    "Fecha": formatear_fecha(m.fecha, cfg.app.fecha_vista_formato) or "Fecha no válida",
                    "Tipo": m.tipo,
                    "Usuario": m.usuario or "",
                }
                for m in movimientos
            ]),
            use_container_width=True,
        )

# =========================
# Descargas
# =========================
st.subheader("Descargar según filtro seleccionado")
col_d1, col_d2 = st.columns(2)
if marco == "rango" and error_rango:
    st.warning(error_rango)
else:
    for col, formato in ((col_d1, "xlsx"), (col_d2, "csv")):
        descarga = construir_descarga_seleccionada(
            movimientos, marco, formato, ahora, inicio, fin,
            max_dias_rango=cfg.reportes.max_dias_rango,
            formato_fecha=cfg.app.fecha_vista_formato,
            formato_monto=cfg.exportacion.formato_monto,
            hoja=cfg.exportacion.hoja_seleccionado,
        )
        if descarga is not None:
            with col:
                st.download_button(
                    f"Descargar Seleccionado {formato.upper()}",
                    data=descarga.contenido,
                    file_name=descarga.nombre,
                    mime=descarga.mime,
                    key=f"sel_{formato}",
                )

st.subheader("Descargar Diario, Semanal y Mensual (3 hojas)")
col_t1, col_t2 = st.columns(2)
for col, formato in ((col_t1, "xlsx"), (col_t2, "csv")):
    descarga = construir_descarga_tres_hojas(
        movimientos, formato, ahora,
        formato_fecha=cfg.app.fecha_vista_formato,
        formato_monto=cfg.exportacion.formato_monto,
    )
    with col:
        if descarga is None:
            st.caption(f"Sin movimientos para {formato.upper()} de tres hojas.")
        else:
            st.download_button(
                f"Descargar 3 Hojas {formato.upper()}",
                data=descarga.contenido,
                file_name=descarga.nombre,
                mime=descarga.mime,
                key=f"tres_{formato}",
            )

# =========================
# Alta de movimientos
# =========================
# Un usuario solo puede cargar movimientos propios; un administrador, para cualquiera.
st.subheader("Nuevo movimiento")
with st.form("alta_movimiento", clear_on_submit=True):
    col_a1, col_a2 = st.columns(2)
    with col_a1:
        sesion_id = st.text_input("Sesión: usuario (id)", "local")
        rol = st.radio("Sesión: rol", ["user", "admin"], horizontal=True)
        user_id = st.text_input("Movimiento para el usuario (id)", "local")
        concepto = st.text_input("Concepto")
    with col_a2:
        monto = st.text_input("Monto", "0")
        fecha_alta = st.date_input("Fecha", value=date.today())
        tipo = st.selectbox("Tipo", ["ingreso", "egreso"], format_func=str.capitalize)
    enviado = st.form_submit_button("Guardar")

if enviado:
    sesion = Sesion(user_id=sesion_id.strip(), rol=rol)
    try:
        variables = preparar_alta_movimiento(
            sesion, user_id.strip(), concepto, monto, fecha_alta.isoformat(), tipo
        )
    except (PermissionError, ValueError) as e:
        st.error(str(e))
    else:
        nuevo = movimiento_desde_registro(
            {"id": f"nuevo-{len(st.session_state['movimientos_nuevos']) + 1}", **variables},
            cfg.reportes.umbral_epoch_segundos,
        )
        st.session_state["movimientos_nuevos"].append(nuevo)
        st.success("Movimiento agregado.")
        st.rerun()
