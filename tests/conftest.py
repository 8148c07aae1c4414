from typing import Dict, List, Optional

import pytest

from rstab_link.common.config import MEMBER_TYPE_BEAM
from rstab_link.common.errors import SessionUnavailableError
from rstab_link.conversion.engine import CrossSectionRecord, MemberRecord, NodeRecord


class FakeEngine:
    """
    In-memory stand-in for ``RstabEngine``.

    Every verb is appended to ``calls``. ``fail_on`` maps a verb name to the
    exception it raises. ``available`` lists the ProgIDs that answer
    ``acquire_active_session``; ``None`` means all of them.
    """

    def __init__(self, fail_on: Optional[Dict[str, Exception]] = None, available=None):
        self.fail_on = dict(fail_on or {})
        self.available = available
        self.calls: List[str] = []
        self.prog_id = None
        self.materials: Dict[int, MaterialRecord] = {}
        self.cross_sections: Dict[int, CrossSectionRecord] = {}
        self.nodes: Dict[int, NodeRecord] = {}
        self.supports: List[SupportRecord] = []
        self.members: Dict[int, MemberRecord] = {}
        self.selected_only = None
        self.model_unit = None
        self.node_count_override = None

    def _call(self, verb: str) -> None:
        self.calls.append(verb)
        exc = self.fail_on.get(verb)
        if exc is not None:
            raise exc

    def count(self, verb: str) -> int:
        return self.calls.count(verb)

    # session
    def acquire_active_session(self, prog_id):
        self._call("acquire_active_session")
        if self.available is not None and prog_id not in self.available:
            raise SessionUnavailableError(f"{prog_id}: not running")
        self.prog_id = prog_id
        return self

    def lock_license(self):
        self._call("lock_license")

    def unlock_license(self):
        self._call("unlock_license")

    def open_structural_data(self):
        self._call("open_structural_data")
        return self

    def begin_modification(self):
        self._call("begin_modification")

    def delete_structural_data(self):
        self._call("delete_structural_data")
        self.materials.clear()
        self.cross_sections.clear()
        self.nodes.clear()
        self.supports.clear()
        self.members.clear()

    def finish_modification(self):
        self._call("finish_modification")

    def release(self):
        self._call("release")

    # writers
    def set_material(self, record):
        self._call("set_material")
        self.materials[record.no] = record

    def set_cross_section(self, record):
        self._call("set_cross_section")
        self.cross_sections[record.no] = record

    def set_node(self, record):
        self._call("set_node")
        self.nodes[record.no] = record

    def set_node_support(self, record):
        self._call("set_node_support")
        self.supports.append(record)

    def set_member(self, record):
        self._call("set_member")
        self.members[record.no] = record

    def set_model_unit(self, unit):
        self._call("set_model_unit")
        self.model_unit = unit

    # readers
    def enable_selection(self, selected_only):
        self._call("enable_selection")
        self.selected_only = selected_only

    def get_node_count(self):
        self._call("get_node_count")
        if self.node_count_override is not None:
            return self.node_count_override
        return len(self.nodes)

    def get_nodes(self, count):
        self._call("get_nodes")
        return list(self.nodes.values())[:count]

    def get_cross_section_count(self):
        self._call("get_cross_section_count")
        return len(self.cross_sections)

    def get_cross_sections(self, count):
        self._call("get_cross_sections")
        return list(self.cross_sections.values())[:count]

    def get_member_count(self):
        self._call("get_member_count")
        return len(self.members)

    def get_members(self, count):
        self._call("get_members")
        return list(self.members.values())[:count]

    def get_node_by_id(self, node_no):
        self._call("get_node_by_id")
        return self.nodes[node_no]

    # seeding helpers for import tests
    def seed_node(self, no, x, y, z):
        self.nodes[no] = NodeRecord(no, float(x), float(y), float(z))

    def seed_cross_section(self, no, description, material_no=1):
        self.cross_sections[no] = CrossSectionRecord(no, material_no, description)

    def seed_member(self, no, start, end, section=1, type=MEMBER_TYPE_BEAM):
        self.members[no] = MemberRecord(no, start, end, section, section, type)


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def frame_engine():
    """Portal frame: two columns and a beam, one IPE section."""
    fake = FakeEngine()
    fake.seed_node(1, 0, 0, 0)
    fake.seed_node(2, 0, 0, 3)
    fake.seed_node(3, 4, 0, 3)
    fake.seed_node(4, 4, 0, 0)
    fake.seed_cross_section(1, "HEB 200")
    fake.seed_cross_section(2, "IPE 300")
    fake.seed_member(1, 1, 2, section=1)
    fake.seed_member(2, 2, 3, section=2)
    fake.seed_member(3, 4, 3, section=1)
    return fake


@pytest.fixture
def two_bar_groups():
    """Two collinear bars sharing an endpoint (0.0005 apart)."""
    return [[((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)), ((1.0005, 0.0, 0.0), (2.0, 0.0, 0.0))]]


@pytest.fixture
def make_engine():
    """Factory for engines with injected failures or limited ProgIDs."""
    return FakeEngine
