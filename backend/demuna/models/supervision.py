"""
Modelos de supervisiones a las DEMUNA.

Incluye la supervisión, su ficha, el seguimiento y los catálogos asociados.
"""

from datetime import date

from sqlalchemy import Boolean, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from demuna.db.base import Base


class Supervision(Base):
    """Supervisión realizada a una defensoría."""

    __tablename__ = "supervisiones"

    nid_supervision: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    codigo_dna: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    fecha: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    codigo_supervisor: Mapped[int | None] = mapped_column(Integer)
    nid_modalidad: Mapped[int | None] = mapped_column(Integer)

    # Sincronización con SISDNA
    nid_estado_sisdna: Mapped[str | None] = mapped_column(String(20))
    txt_campos_desactualizados: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Supervision(id={self.nid_supervision}, codigo_dna='{self.codigo_dna}')>"


class Supervisor(Base):
    """Supervisor de la DSLD."""

    __tablename__ = "supervisores"

    codigo_supervisor: Mapped[int] = mapped_column(Integer, primary_key=True)
    nombre_supervisor: Mapped[str] = mapped_column(String(255), nullable=False)
    flg_activo_dsld: Mapped[bool] = mapped_column(Boolean, default=True)


class SupervisionModalidad(Base):
    """Modalidad de supervisión (ordinaria, extraordinaria, ...)."""

    __tablename__ = "supervision_modalidades"

    nid_modalidad: Mapped[int] = mapped_column(Integer, primary_key=True)
    nombre_modalidad: Mapped[str] = mapped_column(String(255), nullable=False)


class SupervisionFicha(Base):
    """Ficha de supervisión digitalizada."""

    __tablename__ = "supervision_ficha_datos"

    nid_supervision: Mapped[int] = mapped_column(Integer, primary_key=True)
    url_file: Mapped[str | None] = mapped_column(String(500))


class SupervisionSeguimiento(Base):
    """Seguimiento (subsanación y cierre) de una supervisión."""

    __tablename__ = "supervision_seguimientos"

    nid_supervision: Mapped[int] = mapped_column(Integer, primary_key=True)
    txt_informe_seguimiento: Mapped[str | None] = mapped_column(String(500))
    flg_subsanacion: Mapped[bool | None] = mapped_column(Boolean)
    txt_oficio_reiterativo: Mapped[str | None] = mapped_column(String(500))
    txt_oficio_oci: Mapped[str | None] = mapped_column(String(500))
    fecha_cierre: Mapped[date | None] = mapped_column(Date)
    txt_proveido_cierre: Mapped[str | None] = mapped_column(String(500))
    nid_modalidad_cierre: Mapped[str | None] = mapped_column(String(20))


class SeguimientoCierreTipo(Base):
    """Catálogo de tipos de cierre del seguimiento."""

    __tablename__ = "seguimiento_cierre_tipos"

    cod_tipo_cierre: Mapped[str] = mapped_column(String(20), primary_key=True)
    txt_nombre: Mapped[str] = mapped_column(String(255), nullable=False)
