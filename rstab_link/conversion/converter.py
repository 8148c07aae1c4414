#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RSTAB 双向转换
Structural graph <-> RSTAB model.

Both directions run a fixed list of steps inside one ``EngineSession``. A
step that raises is recorded on the converter's ``ConversionState`` with the
step's error code, and every later step is skipped. The session's FINALIZE
always runs.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from rstab_link.common.config import MEMBER_TYPE_BEAM, MEMBER_TYPE_DUMMY, SETTINGS
from rstab_link.common.errors import ErrorCode
from rstab_link.common.utility_functions import Point3, as_point
from rstab_link.model.structure import CrossSection, Edge, Node, StructuralGraph

from .engine import (
    CrossSectionRecord,
    MaterialRecord,
    MemberRecord,
    NodeRecord,
    RstabEngine,
    SupportRecord,
)
from .session import EngineSession
from .state import ConversionState, ConversionStep

log = logging.getLogger(__name__)
if not log.handlers:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

Step = Tuple[ConversionStep, ErrorCode, Callable[[], None]]


class RstabConverter:
    def __init__(
        self,
        graph: Optional[StructuralGraph] = None,
        engine=None,
        engine_factory: Callable[[], object] = RstabEngine,
    ):
        self.graph = graph
        self.engine = engine
        self.engine_factory = engine_factory
        self.state = ConversionState(type(self).__name__)
        self._counts: Dict[str, int] = {}
        self._nodes_by_id: Dict[int, Node] = {}

    @property
    def error_code(self) -> int:
        return self.state.code

    @property
    def error_message(self) -> str:
        return self.state.message

    # ------------------------------------------------------------------ driver

    def _ensure_engine(self) -> bool:
        if self.engine is not None:
            return True
        with self.state.guard(ConversionStep.PREPARE, ErrorCode.MARSHAL):
            self.engine = self.engine_factory()
        return self.state.ok

    def _run(self, steps: Sequence[Step]) -> None:
        for step, code, action in steps:
            if not self.state.ok:
                log.debug("Skipping %s after failure in %s", step.value, self.state.error.step.value)
                break
            with self.state.guard(step, code):
                action()

    # ------------------------------------------------------------------ export

    def to_engine(
        self,
        anchor_points: Optional[Sequence] = None,
        tolerance: Optional[float] = None,
        delete_existing: bool = True,
    ) -> bool:
        """Write ``self.graph`` into the active RSTAB model. Returns True on success."""
        if self.graph is None:
            raise ValueError("RstabConverter.to_engine() needs a graph")
        self.state.reset()
        anchors = [as_point(point) for point in (anchor_points or [])]
        tol = SETTINGS.tolerances.resolve(tolerance)

        log.info(
            "RSTAB export: %s nodes, %s members, %s anchor points",
            len(self.graph.nodes),
            len(self.graph.edges),
            len(anchors),
        )
        if not self._ensure_engine():
            return False

        steps: List[Step] = [
            (ConversionStep.SET_MATERIALS, ErrorCode.MATERIAL, self._write_materials),
            (ConversionStep.SET_CROSS_SECTIONS, ErrorCode.CROSS_SECTION, self._write_cross_sections),
            (ConversionStep.SET_NODES, ErrorCode.NODE, self._write_nodes),
        ]
        if anchors:
            steps.append((ConversionStep.SET_SUPPORTS, ErrorCode.SUPPORT, lambda: self._write_supports(anchors, tol)))
        else:
            log.debug("No anchor points, supports skipped")
        steps += [
            (ConversionStep.SET_MEMBERS, ErrorCode.MEMBER, self._write_members),
            (ConversionStep.SET_MODEL_UNIT, ErrorCode.MARSHAL, self._set_model_unit),
        ]

        with EngineSession(self.engine, self.state, modify=True, delete_existing=delete_existing):
            self._run(steps)

        if self.state.ok:
            log.info("RSTAB export finished")
        return self.state.ok

    def _write_materials(self) -> None:
        defaults = SETTINGS.defaults
        if not self.graph.materials:
            self.engine.set_material(MaterialRecord(defaults.material_id, defaults.material_description))
            return
        for material in self.graph.materials:
            self.engine.set_material(MaterialRecord(material.id, material.description))

    def _write_cross_sections(self) -> None:
        defaults = SETTINGS.defaults
        if not self.graph.cross_sections:
            self.engine.set_cross_section(
                CrossSectionRecord(
                    defaults.cross_section_id,
                    defaults.material_id,
                    defaults.cross_section_description,
                )
            )
            return

        for section in self.graph.cross_sections:
            material_no = section.material.id if section.material is not None else defaults.material_id
            if self.graph.materials:
                resolvable = self.graph.material_by_id(material_no) is not None
            else:
                # only the default material was written
                resolvable = material_no == defaults.material_id
            if not resolvable:
                raise ValueError(f"Cross section {section.id} references unknown material {material_no}")
            self.engine.set_cross_section(CrossSectionRecord(section.id, material_no, section.description))

    def _write_nodes(self) -> None:
        for node in self.graph.nodes:
            self.engine.set_node(NodeRecord(node.id, node.x, node.y, node.z))

    def _write_supports(self, anchors: List[Point3], tolerance: float) -> None:
        """
        One fixed support per anchor point, on the first node within ``tolerance``.

        Anchors matching no node are skipped. An anchor landing on a node that
        already carries a support adds nothing.
        """
        support = SETTINGS.support
        support_no = 0
        unmatched = 0
        supported = set()
        for anchor in anchors:
            node = self.graph.find_node_near(anchor, tolerance)
            if node is None:
                unmatched += 1
                continue
            if id(node) in supported:
                continue
            supported.add(id(node))
            support_no += 1
            self.engine.set_node_support(
                SupportRecord(
                    no=support_no,
                    node_list=str(node.id),
                    rotation_sequence=support.rotation_sequence,
                    fu_x=support.fu_x,
                    fu_y=support.fu_y,
                    fu_z=support.fu_z,
                    phi_x=support.phi_x,
                    phi_y=support.phi_y,
                    phi_z=support.phi_z,
                )
            )
        if unmatched:
            log.debug("%s anchor points matched no node", unmatched)
        log.info("Supports written: %s", support_no)

    def _write_members(self) -> None:
        default_section = SETTINGS.defaults.cross_section_id
        for member_no, edge in enumerate(self.graph.edges, start=1):
            section_no = edge.cross_section.id if edge.cross_section is not None else default_section
            self.engine.set_member(
                MemberRecord(
                    no=member_no,
                    start_node_no=edge.start.id,
                    end_node_no=edge.end.id,
                    start_cross_section_no=section_no,
                    end_cross_section_no=section_no,
                    type=MEMBER_TYPE_BEAM,
                )
            )

    def _set_model_unit(self) -> None:
        """
        Forward the model length unit to engines that accept one.

        RSTAB 6 has no unit setter on its COM interface, so ``RstabEngine`` does
        not define ``set_model_unit`` and this step only logs against it.
        """
        hook = getattr(self.engine, "set_model_unit", None)
        if hook is None:
            log.debug("Engine has no model unit setter, keeping the RSTAB default")
            return
        hook(SETTINGS.session.model_unit)

    # ------------------------------------------------------------------ import

    def from_engine(self, selected_only: bool = False, include_dummy: bool = False) -> StructuralGraph:
        """Read the active RSTAB model into a fresh graph (also stored on ``self.graph``)."""
        self.state.reset()
        self.graph = StructuralGraph()
        self._counts = {}
        self._nodes_by_id = {}

        if not self._ensure_engine():
            return self.graph

        steps: List[Step] = [
            (ConversionStep.ENABLE_SELECTION, ErrorCode.SELECTION, lambda: self.engine.enable_selection(selected_only)),
            (ConversionStep.GET_NODE_COUNT, ErrorCode.NODE_COUNT, self._read_node_count),
            (ConversionStep.GET_NODES, ErrorCode.NODE, self._read_nodes),
            (ConversionStep.GET_CROSS_SECTION_COUNT, ErrorCode.CROSS_SECTION_COUNT, self._read_cross_section_count),
            (ConversionStep.GET_CROSS_SECTIONS, ErrorCode.CROSS_SECTION, self._read_cross_sections),
            (ConversionStep.GET_MEMBER_COUNT, ErrorCode.MEMBER_COUNT, self._read_member_count),
            (ConversionStep.GET_MEMBERS, ErrorCode.MEMBER, lambda: self._read_members(include_dummy)),
        ]

        with EngineSession(self.engine, self.state, modify=False):
            self._run(steps)

        if self.state.ok:
            log.info("RSTAB import finished: %r", self.graph)
        return self.graph

    def _read_node_count(self) -> None:
        count = self.engine.get_node_count()
        if count <= 0:
            raise ValueError(f"Incorrect node count: {count}")
        self._counts["nodes"] = count

    def _read_nodes(self) -> None:
        for record in self.engine.get_nodes(self._counts["nodes"]):
            self._add_node(record)

    def _add_node(self, record: NodeRecord) -> Node:
        node = self.graph.add_node(Node(record.no, record.x, record.y, record.z))
        self._nodes_by_id[node.id] = node
        return node

    def _node(self, node_no: int) -> Node:
        node = self._nodes_by_id.get(node_no)
        if node is None:
            node = self._add_node(self.engine.get_node_by_id(node_no))
        return node

    def _read_cross_section_count(self) -> None:
        self._counts["cross_sections"] = self.engine.get_cross_section_count()

    def _read_cross_sections(self) -> None:
        count = self._counts["cross_sections"]
        if count <= 0:
            log.debug("RSTAB model has no cross sections")
            return
        for record in self.engine.get_cross_sections(count):
            self.graph.add_cross_section(CrossSection(id=record.no, material=None, description=record.description))

    def _read_member_count(self) -> None:
        self._counts["members"] = self.engine.get_member_count()

    def _read_members(self, include_dummy: bool) -> None:
        count = self._counts["members"]
        if count <= 0:
            log.debug("RSTAB model has no members")
            return

        dummies = duplicates = 0
        for record in self.engine.get_members(count):
            if record.type == MEMBER_TYPE_DUMMY and not include_dummy:
                dummies += 1
                continue
            edge = Edge(
                start=self._node(record.start_node_no),
                end=self._node(record.end_node_no),
                cross_section=self.graph.cross_section_by_id(record.start_cross_section_no),
                id=record.no,
            )
            if not self.graph.add_edge(edge, deduplicate=True):
                duplicates += 1
        log.info("Members read: %s (dummy skipped %s, duplicates %s)", len(self.graph.edges), dummies, duplicates)


# ---------------------------------------------------------------------- API


def export_graph(
    graph: StructuralGraph,
    anchor_points: Optional[Sequence] = None,
    tolerance: Optional[float] = None,
    delete_existing: bool = True,
    engine=None,
) -> Tuple[int, str]:
    converter = RstabConverter(graph=graph, engine=engine)
    converter.to_engine(anchor_points=anchor_points, tolerance=tolerance, delete_existing=delete_existing)
    return converter.error_code, converter.error_message


def import_graph(
    selected_only: bool = False,
    include_dummy: bool = False,
    engine=None,
) -> Tuple[StructuralGraph, int, str]:
    converter = RstabConverter(engine=engine)
    graph = converter.from_engine(selected_only=selected_only, include_dummy=include_dummy)
    return graph, converter.error_code, converter.error_message


__all__ = ["RstabConverter", "export_graph", "import_graph"]
