from __future__ import annotations
import yaml
from dataclasses import dataclass
from pathlib import Path


_CONFIG_DEFAULT = Path(__file__).resolve().parent.parent / "config.yaml"


@dataclass(frozen=True)
class AppConfig:
    title: str
    page_layout: str
    fecha_vista_formato: str
    log_level: str = "INFO"


@dataclass(frozen=True)
class ReportesConfig:
    max_dias_rango: int
    umbral_epoch_segundos: int
    marco_por_defecto: str


@dataclass(frozen=True)
class ExportacionConfig:
    formato_monto: str
    hoja_seleccionado: str


@dataclass(frozen=True)
class Config:
    app: AppConfig
    reportes: ReportesConfig
    exportacion: ExportacionConfig


def load_config(path: str | Path | None = None) -> Config:
    with open(path or _CONFIG_DEFAULT, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    app = AppConfig(**data["app"])
    rep = ReportesConfig(**data["reportes"])
    exp = ExportacionConfig(**data["exportacion"])

    return Config(app=app, reportes=rep, exportacion=exp)
