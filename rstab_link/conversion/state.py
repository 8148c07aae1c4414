#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Step bookkeeping for RSTAB conversions.

The first recorded failure wins: once ``ConversionState.error`` is set it is
never replaced, and the driver skips every remaining step except teardown.
Teardown failures after an earlier error land in ``teardown_errors``.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from rstab_link.common.errors import ERROR_MESSAGES, ErrorCode

log = logging.getLogger(__name__)
if not log.handlers:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


class ConversionStep(str, Enum):
    PREPARE = "prepare"
    SET_MATERIALS = "set_materials"
    SET_CROSS_SECTIONS = "set_cross_sections"
    SET_NODES = "set_nodes"
    SET_SUPPORTS = "set_supports"
    SET_MEMBERS = "set_members"
    SET_MODEL_UNIT = "set_model_unit"
    ENABLE_SELECTION = "enable_selection"
    GET_NODE_COUNT = "get_node_count"
    GET_NODES = "get_nodes"
    GET_CROSS_SECTION_COUNT = "get_cross_section_count"
    GET_CROSS_SECTIONS = "get_cross_sections"
    GET_MEMBER_COUNT = "get_member_count"
    GET_MEMBERS = "get_members"
    FINALIZE = "finalize"


@dataclass(frozen=True)
class ConversionError:
    code: ErrorCode
    message: str
    step: ConversionStep
    origin: str

    def describe(self) -> str:
        return f"{self.origin}->{self.step.value} {ERROR_MESSAGES[self.code]}: {self.message}"


class ConversionState:
    def __init__(self, owner: str):
        self.owner = owner
        self.reset()

    def reset(self) -> None:
        self.error: Optional[ConversionError] = None
        self.teardown_errors: List[ConversionError] = []
        self.step: Optional[ConversionStep] = None
        self.completed: List[ConversionStep] = []

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> int:
        return int(self.error.code) if self.error else int(ErrorCode.NONE)

    @property
    def message(self) -> str:
        if self.error is None:
            return ERROR_MESSAGES[ErrorCode.NONE]
        return self.error.describe()

    def enter(self, step: ConversionStep) -> None:
        self.step = step
        log.debug("[%s] step %s", self.owner, step.value)

    def fail(self, code: ErrorCode, message: str, step: Optional[ConversionStep] = None) -> bool:
        """Record a failure unless one is already recorded. Returns True if this one was kept."""
        error = ConversionError(code, message, step or self.step or ConversionStep.PREPARE, self.owner)
        if self.error is not None:
            log.debug("Ignoring later failure (%s) after %s", error.describe(), self.error.step.value)
            return False
        self.error = error
        log.error("%s", error.describe())
        return True

    def record_teardown(self, code: ErrorCode, message: str) -> None:
        if self.error is None:
            self.fail(code, message, ConversionStep.FINALIZE)
            return
        error = ConversionError(code, message, ConversionStep.FINALIZE, self.owner)
        self.teardown_errors.append(error)
        log.warning("Teardown failure after earlier error: %s", error.describe())

    @contextmanager
    def guard(self, step: ConversionStep, code: ErrorCode) -> Iterator[None]:
        """Run one step; any exception inside becomes ``code`` on this state."""
        self.enter(step)
        try:
            yield
        except Exception as exc:
            self.fail(code, str(exc) or type(exc).__name__, step)
        else:
            if self.ok:
                self.completed.append(step)


__all__ = ["ConversionStep", "ConversionError", "ConversionState"]
