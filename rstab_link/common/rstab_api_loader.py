#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RSTAB API 加载器
负责加载 .NET 运行时和 RSTAB COM interop 程序集

Loading happens once per process, on first use. Failures raise
``ApiLoadError`` so that a converter can record them as a PREPARE error
instead of ending the interpreter.
"""

import importlib
import logging

from .config import RSTAB_API_NAMESPACE, RSTAB_INTEROP_DLL_PATH, USE_NET_CORE
from .errors import ApiLoadError

log = logging.getLogger(__name__)
if not log.handlers:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

# 模块级变量
RstabApi = None
System = None
COMException = None
Marshal = None
_runtime_loaded = False


def _load_runtime() -> None:
    """加载 .NET 运行时 (每个进程只能加载一次)"""
    global _runtime_loaded
    if _runtime_loaded:
        return

    runtime = "coreclr" if USE_NET_CORE else "netfx"
    log.info("正在加载 .NET 运行时 (%s)...", runtime)
    try:
        from pythonnet import load
    except ImportError as exc:
        raise ApiLoadError(f"pythonnet 库缺失或导入失败: {exc}。请通过 'pip install pythonnet' 安装。") from exc
    try:
        load(runtime)
    except Exception as exc:
        raise ApiLoadError(f".NET 运行时 ({runtime}) 加载失败: {exc}") from exc
    _runtime_loaded = True


def load_dotnet_rstab_api():
    """加载.NET运行时和RSTAB API, 返回 (RstabApi, System, COMException, Marshal)"""
    global RstabApi, System, COMException, Marshal

    _load_runtime()
    try:
        import clr
        import System as Sys
        from System.Runtime.InteropServices import COMException as ComExc
        from System.Runtime.InteropServices import Marshal as Msh
    except ImportError as exc:
        raise ApiLoadError(f".NET System 库导入失败: {exc}") from exc

    log.info("正在加载 RSTAB interop: %s", RSTAB_INTEROP_DLL_PATH)
    try:
        clr.AddReference(RSTAB_INTEROP_DLL_PATH)
        api = importlib.import_module(RSTAB_API_NAMESPACE)
    except Exception as exc:
        raise ApiLoadError(
            f"无法加载 RSTAB interop 程序集 {RSTAB_INTEROP_DLL_PATH} ({RSTAB_API_NAMESPACE}): {exc}。"
            f"请确认 RSTAB 安装正确, 或通过 RSTAB_INTEROP_DLL 环境变量指定路径。"
        ) from exc

    RstabApi, System, COMException, Marshal = api, Sys, ComExc, Msh
    log.info("RSTAB API 引用已成功加载 (%s)", RSTAB_API_NAMESPACE)
    return RstabApi, System, COMException, Marshal


def get_api_objects():
    """获取加载后的API对象"""
    return RstabApi, System, COMException, Marshal


def ensure_api_loaded():
    """Load the API on first use and return the API objects."""
    if RstabApi is None:
        return load_dotnet_rstab_api()
    return get_api_objects()
