#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Configuration constants and settings dataclasses for the RSTAB link."""

import os
from dataclasses import dataclass
from typing import Tuple

# ---------------------------- RSTAB paths -----------------------------------

# RSTAB 6 only registers its COM server for .NET Framework hosts
USE_NET_CORE = False
RSTAB_INTEROP_DLL_PATH = os.environ.get(
    "RSTAB_INTEROP_DLL",
    r"C:\Program Files\Dlubal\RSTAB6\Interop.RSTAB6.dll",
)
RSTAB_API_NAMESPACE = "Dlubal.RSTAB6"
OUTPUT_DIRECTORY = os.environ.get(
    "RSTAB_LINK_OUTPUT_DIR",
    os.path.join(os.path.expanduser("~"), "rstab_link_output"),
)
SNAPSHOT_NAME = "structure_graph.npz"
WORKBOOK_NAME = "structure_graph.xlsx"

# ---------------------------- RSTAB session ---------------------------------

# Tried in order; the demo edition registers under its own ProgID
RSTAB_PROG_IDS: Tuple[str, ...] = ("RSTAB6.Structure", "RSTAB6DEMO.Structure")
MODEL_UNIT = "m"

# ---------------------------- tolerances ------------------------------------

POINT_TOLERANCE = 0.001
# Stand-in for the CAD document's absolute tolerance when the caller gives none
DEFAULT_MODEL_TOLERANCE = 0.001

# ---------------------------- defaults --------------------------------------

DEFAULT_MATERIAL_ID = 1
DEFAULT_MATERIAL_DESCRIPTION = "Steel St 37"
DEFAULT_CROSS_SECTION_ID = 1
DEFAULT_CROSS_SECTION_DESCRIPTION = "IPE 100"

# ---------------------------- supports --------------------------------------

# RSTAB spring constants: -1 = fixed, 0 = free
SUPPORT_ROTATION_SEQUENCE = 0
SUPPORT_FU_X = -1
SUPPORT_FU_Y = -1
SUPPORT_FU_Z = -1
SUPPORT_PHI_X = 0
SUPPORT_PHI_Y = 0
SUPPORT_PHI_Z = -1

# ---------------------------- member types ----------------------------------

MEMBER_TYPE_BEAM = 0
MEMBER_TYPE_DUMMY = 7


# ---------------------------- settings dataclasses --------------------------


@dataclass(frozen=True)
class PathsConfig:
    use_net_core: bool
    interop_dll_path: str
    api_namespace: str
    output_directory: str
    snapshot_name: str
    workbook_name: str


@dataclass(frozen=True)
class SessionConfig:
    prog_ids: Tuple[str, ...]
    model_unit: str


@dataclass(frozen=True)
class ToleranceConfig:
    point_tolerance: float
    default_model_tolerance: float

    def resolve(self, tolerance) -> float:
        """Return ``tolerance`` or the model default when it is missing or not positive."""
        if tolerance is None or tolerance <= 0:
            return self.default_model_tolerance
        return float(tolerance)


@dataclass(frozen=True)
class DefaultsConfig:
    material_id: int
    material_description: str
    cross_section_id: int
    cross_section_description: str


@dataclass(frozen=True)
class SupportConfig:
    rotation_sequence: int
    fu_x: float
    fu_y: float
    fu_z: float
    phi_x: float
    phi_y: float
    phi_z: float


@dataclass(frozen=True)
class Settings:
    paths: PathsConfig
    session: SessionConfig
    tolerances: ToleranceConfig
    defaults: DefaultsConfig
    support: SupportConfig


SETTINGS = Settings(
    paths=PathsConfig(
        use_net_core=USE_NET_CORE,
        interop_dll_path=RSTAB_INTEROP_DLL_PATH,
        api_namespace=RSTAB_API_NAMESPACE,
        output_directory=OUTPUT_DIRECTORY,
        snapshot_name=SNAPSHOT_NAME,
        workbook_name=WORKBOOK_NAME,
    ),
    session=SessionConfig(
        prog_ids=RSTAB_PROG_IDS,
        model_unit=MODEL_UNIT,
    ),
    tolerances=ToleranceConfig(
        point_tolerance=POINT_TOLERANCE,
        default_model_tolerance=DEFAULT_MODEL_TOLERANCE,
    ),
    defaults=DefaultsConfig(
        material_id=DEFAULT_MATERIAL_ID,
        material_description=DEFAULT_MATERIAL_DESCRIPTION,
        cross_section_id=DEFAULT_CROSS_SECTION_ID,
        cross_section_description=DEFAULT_CROSS_SECTION_DESCRIPTION,
    ),
    support=SupportConfig(
        rotation_sequence=SUPPORT_ROTATION_SEQUENCE,
        fu_x=SUPPORT_FU_X,
        fu_y=SUPPORT_FU_Y,
        fu_z=SUPPORT_FU_Z,
        phi_x=SUPPORT_PHI_X,
        phi_y=SUPPORT_PHI_Y,
        phi_z=SUPPORT_PHI_Z,
    ),
)
