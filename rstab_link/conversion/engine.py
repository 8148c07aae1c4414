#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RSTAB COM adapter.

``RstabEngine`` wraps one ``IrsStructure`` / ``IrsStructuralData`` handle pair
and exposes the handful of verbs the converter needs, exchanging plain
dataclass records instead of RSTAB structs. Any object with the same method
names can stand in for it (the tests use an in-memory engine).
"""

import logging
from dataclasses import dataclass
from typing import Any, List

from rstab_link.common.config import MEMBER_TYPE_BEAM
from rstab_link.common.errors import EngineError, SessionUnavailableError
from rstab_link.common.rstab_api_loader import ensure_api_loaded
from rstab_link.common.utility_functions import empty_array

log = logging.getLogger(__name__)
if not log.handlers:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


# ---------------------------- records ---------------------------------------


@dataclass(frozen=True)
class NodeRecord:
    no: int
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class MaterialRecord:
    no: int
    description: str


@dataclass(frozen=True)
class CrossSectionRecord:
    no: int
    material_no: int
    description: str


@dataclass(frozen=True)
class SupportRecord:
    no: int
    node_list: str
    rotation_sequence: int
    fu_x: float
    fu_y: float
    fu_z: float
    phi_x: float
    phi_y: float
    phi_z: float


@dataclass(frozen=True)
class MemberRecord:
    no: int
    start_node_no: int
    end_node_no: int
    start_cross_section_no: int
    end_cross_section_no: int
    type: int = MEMBER_TYPE_BEAM


# ---------------------------- adapter ---------------------------------------


def _filled_array(ret: Any, buffer: Any) -> Any:
    """
    RSTAB array getters fill a caller-allocated buffer. Depending on how the
    interop marshals the parameter pythonnet either mutates ``buffer`` in place
    or hands the filled array back in the return value.
    """
    if isinstance(ret, tuple):
        arrays = [item for item in ret if hasattr(item, "Length")]
        return arrays[-1] if arrays else buffer
    if ret is not None and hasattr(ret, "Length"):
        return ret
    return buffer


class RstabEngine:
    def __init__(self):
        self.api, self.System, self.COMException, self.Marshal = ensure_api_loaded()
        self._structure = None
        self._data = None

    # -- session -------------------------------------------------------------

    def acquire_active_session(self, prog_id: str):
        try:
            raw = self.Marshal.GetActiveObject(prog_id)
        except self.COMException as exc:
            raise SessionUnavailableError(f"{prog_id}: {exc.Message}") from exc
        self._structure = self.api.IrsStructure(raw)
        log.info("已附加到 RSTAB 实例 (%s)", prog_id)
        return self._structure

    def _require_structure(self):
        if self._structure is None:
            raise EngineError("RSTAB structure handle is not acquired")
        return self._structure

    def _require_data(self):
        if self._data is None:
            raise EngineError("RSTAB structural data handle is not open")
        return self._data

    def lock_license(self) -> None:
        self._require_structure().rsGetApplication().rsLockLicence()

    def unlock_license(self) -> None:
        self._require_structure().rsGetApplication().rsUnlockLicence()

    def open_structural_data(self):
        self._data = self._require_structure().rsGetStructuralData()
        return self._data

    def begin_modification(self) -> None:
        self._require_data().rsPrepareModification()

    def delete_structural_data(self) -> None:
        self._require_data().rsDeleteStructuralData()

    def finish_modification(self) -> None:
        self._require_data().rsFinishModification()

    def release(self) -> None:
        self._data = None
        structure, self._structure = self._structure, None
        if structure is not None:
            self.Marshal.ReleaseComObject(structure)

    # -- writers -------------------------------------------------------------

    def set_material(self, record: MaterialRecord) -> None:
        material = self.api.RS_MATERIAL()
        material.iNo = record.no
        material.strDescription = record.description
        self._require_data().rsSetMaterial(material)

    def set_cross_section(self, record: CrossSectionRecord) -> None:
        section = self.api.RS_CROSS_SECTION()
        section.iNo = record.no
        section.iMaterialNo = record.material_no
        section.strDescription = record.description
        self._require_data().rsSetCrossSection(section)

    def set_node(self, record: NodeRecord) -> None:
        node = self.api.RS_NODE()
        node.iNo = record.no
        node.csType = self.api.RS_CS_TYPE.CS_CARTESIAN
        node.x = record.x
        node.y = record.y
        node.z = record.z
        self._require_data().rsSetNode(node)

    def set_node_support(self, record: SupportRecord) -> None:
        support = self.api.RS_NODE_SUPPORT()
        support.ID = str(record.no)
        support.iNo = record.no
        support.rotationSequence = record.rotation_sequence
        support.fuX = record.fu_x
        support.fuY = record.fu_y
        support.fuZ = record.fu_z
        support.fPhiX = record.phi_x
        support.fPhiY = record.phi_y
        support.fPhiZ = record.phi_z
        support.strNodeList = record.node_list
        self._require_data().rsSetNodeSupport(support)

    def _member_type(self, value: int):
        if value == MEMBER_TYPE_BEAM:
            return self.api.RS_MEMBER_TYPE.MT_BEAM
        import clr

        return self.System.Enum.ToObject(clr.GetClrType(self.api.RS_MEMBER_TYPE), value)

    def set_member(self, record: MemberRecord) -> None:
        member = self.api.RS_MEMBER()
        member.iNo = record.no
        member.ID = str(record.no)
        member.type = self._member_type(record.type)
        member.iStartNodeNo = record.start_node_no
        member.iEndNodeNo = record.end_node_no
        member.iStartCrossSectionNo = record.start_cross_section_no
        member.iEndCrossSectionNo = record.end_cross_section_no
        self._require_data().rsSetMember(member)

    # -- readers -------------------------------------------------------------

    def enable_selection(self, selected_only: bool) -> None:
        self._require_data().rsEnableSelections(bool(selected_only))

    def get_node_count(self) -> int:
        return int(self._require_data().rsGetNodeCount())

    @staticmethod
    def _node_record(node) -> NodeRecord:
        return NodeRecord(int(node.iNo), float(node.x), float(node.y), float(node.z))

    def get_nodes(self, count: int) -> List[NodeRecord]:
        buffer = empty_array(self.api.RS_NODE, count)
        nodes = _filled_array(self._require_data().rsGetNodeArr(count, buffer), buffer)
        return [self._node_record(node) for node in nodes]

    def get_cross_section_count(self) -> int:
        return int(self._require_data().rsGetCrossSectionCount())

    def get_cross_sections(self, count: int) -> List[CrossSectionRecord]:
        buffer = empty_array(self.api.RS_CROSS_SECTION, count)
        sections = _filled_array(self._require_data().rsGetCrossSectionArr(count, buffer), buffer)
        return [
            CrossSectionRecord(int(cs.iNo), int(cs.iMaterialNo), str(cs.strDescription or ""))
            for cs in sections
        ]

    def get_member_count(self) -> int:
        return int(self._require_data().rsGetMemberCount())

    def get_members(self, count: int) -> List[MemberRecord]:
        buffer = empty_array(self.api.RS_MEMBER, count)
        members = _filled_array(self._require_data().rsGetMemberArr(count, buffer), buffer)
        return [
            MemberRecord(
                no=int(m.iNo),
                start_node_no=int(m.iStartNodeNo),
                end_node_no=int(m.iEndNodeNo),
                start_cross_section_no=int(m.iStartCrossSectionNo),
                end_cross_section_no=int(m.iEndCrossSectionNo),
                type=int(self.System.Convert.ToInt32(m.type)),
            )
            for m in members
        ]

    def get_node_by_id(self, node_no: int) -> NodeRecord:
        item = self._require_data().rsGetNode(node_no, self.api.ITEM_AT.AT_NO)
        return self._node_record(item.rsGetData())


__all__ = [
    "NodeRecord",
    "MaterialRecord",
    "CrossSectionRecord",
    "SupportRecord",
    "MemberRecord",
    "RstabEngine",
]
