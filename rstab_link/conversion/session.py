#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RSTAB 会话管理
Scoped acquisition of the structure / structural-data handle pair.

Entering the session runs the PREPARE step, leaving it runs FINALIZE:
commit the modification if one was started, unlock the licence if it was
locked, then release the COM handles. Leaving happens exactly once on every
path, including after a failed PREPARE.
"""

import logging
from typing import Optional, Sequence

from rstab_link.common.config import SETTINGS
from rstab_link.common.errors import ErrorCode, SessionUnavailableError

from .state import ConversionState, ConversionStep

log = logging.getLogger(__name__)
if not log.handlers:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


class EngineSession:
    def __init__(
        self,
        engine,
        state: ConversionState,
        modify: bool,
        delete_existing: bool = False,
        prog_ids: Optional[Sequence[str]] = None,
    ):
        self.engine = engine
        self.state = state
        self.modify = modify
        self.delete_existing = delete_existing
        self.prog_ids = tuple(prog_ids or SETTINGS.session.prog_ids)
        self.acquired = False
        self.locked = False
        self.data_open = False
        self.modifying = False
        self.closed = False

    def __enter__(self) -> "EngineSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def _acquire(self) -> bool:
        last_error = ""
        for prog_id in self.prog_ids:
            try:
                self.engine.acquire_active_session(prog_id)
            except SessionUnavailableError as exc:
                log.info("RSTAB ProgID %s 不可用: %s", prog_id, exc)
                last_error = str(exc)
                continue
            except Exception as exc:
                self.state.fail(ErrorCode.MARSHAL, str(exc), ConversionStep.PREPARE)
                return False
            self.acquired = True
            return True

        self.state.fail(
            ErrorCode.MARSHAL_COM,
            last_error or "no RSTAB ProgID configured",
            ConversionStep.PREPARE,
        )
        return False

    def open(self) -> None:
        self.state.enter(ConversionStep.PREPARE)
        if not self._acquire():
            return

        try:
            self.engine.lock_license()
            self.locked = True
            self.engine.open_structural_data()
            self.data_open = True
            if self.modify:
                self.engine.begin_modification()
                self.modifying = True
                if self.delete_existing:
                    self.engine.delete_structural_data()
                    log.info("已清除 RSTAB 现有结构数据")
        except Exception as exc:
            self.state.fail(ErrorCode.MARSHAL, str(exc), ConversionStep.PREPARE)
            return

        self.state.completed.append(ConversionStep.PREPARE)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.state.enter(ConversionStep.FINALIZE)

        if self.modifying:
            try:
                self.engine.finish_modification()
            except Exception as exc:
                self.state.record_teardown(ErrorCode.DATA_HANDLE, str(exc))
            finally:
                self.modifying = False
        self.data_open = False

        if self.locked:
            try:
                self.engine.unlock_license()
            except Exception as exc:
                self.state.record_teardown(ErrorCode.STRUCTURE_HANDLE, str(exc))
            finally:
                self.locked = False

        try:
            self.engine.release()
        except Exception as exc:
            self.state.record_teardown(ErrorCode.STRUCTURE_HANDLE, str(exc))
        finally:
            self.acquired = False

        self.state.completed.append(ConversionStep.FINALIZE)
        log.debug("RSTAB session released (ok=%s)", self.state.ok)


__all__ = ["EngineSession"]
