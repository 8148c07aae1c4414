#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Error codes and exception types shared by the conversion protocol."""

from enum import IntEnum
from typing import Dict


class ErrorCode(IntEnum):
    """
    Closed set of conversion outcomes.

    0 is success, 100-999 are engine-side step failures, 1000-1099 are
    marshalling failures around the COM session.
    """

    NONE = 0
    DATA_HANDLE = 100
    STRUCTURE_HANDLE = 101
    MATERIAL = 102
    CROSS_SECTION = 103
    NODE = 104
    SUPPORT = 105
    MEMBER = 106
    SELECTION = 107
    NODE_COUNT = 108
    CROSS_SECTION_COUNT = 109
    MEMBER_COUNT = 110
    LOCAL_NODE = 111
    LOCAL_LINE = 112
    MARSHAL = 1000
    MARSHAL_COM = 1099


ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.NONE: "No errors",
    ErrorCode.DATA_HANDLE: "RSTAB structural data handle error",
    ErrorCode.STRUCTURE_HANDLE: "RSTAB structure handle error",
    ErrorCode.MATERIAL: "RSTAB material creation error",
    ErrorCode.CROSS_SECTION: "RSTAB cross section creation/getting error",
    ErrorCode.NODE: "RSTAB node creation/getting error",
    ErrorCode.SUPPORT: "RSTAB node support creation error",
    ErrorCode.MEMBER: "RSTAB member creation/getting error",
    ErrorCode.SELECTION: "RSTAB selection count getting error",
    ErrorCode.NODE_COUNT: "RSTAB node count getting error",
    ErrorCode.CROSS_SECTION_COUNT: "RSTAB cross section count getting error",
    ErrorCode.MEMBER_COUNT: "RSTAB member count getting error",
    ErrorCode.LOCAL_NODE: "Local point creation error",
    ErrorCode.LOCAL_LINE: "Local line creation error",
    ErrorCode.MARSHAL: "Marshalling error",
    ErrorCode.MARSHAL_COM: "COM marshalling error",
}


class EngineError(Exception):
    """Raised by the engine adapter for failures it can classify itself."""


class SessionUnavailableError(EngineError):
    """No running RSTAB instance answered for the requested ProgID."""


class ApiLoadError(EngineError):
    """The .NET runtime or the RSTAB interop assembly could not be loaded."""


class GeometryError(ValueError):
    """Input curve or point cannot be turned into graph geometry."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.LOCAL_LINE):
        super().__init__(message)
        self.code = code


__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "EngineError",
    "SessionUnavailableError",
    "ApiLoadError",
    "GeometryError",
]
