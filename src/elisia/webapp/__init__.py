"""Elisia web dashboard package (FastAPI + SQLModel)."""
from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Any, List

_IMPL_MODULE: ModuleType | None = None

_WEB_DEPENDENCIES = {"fastapi", "starlette", "sqlmodel", "sqlalchemy", "dotenv", "httpx", "itsdangerous"}
_INSTALL_HINT = "elisia.webapp requires the FastAPI/SQLModel stack. Install the project with `pip install -e .`."

try:
    from . import persistence as _persistence
except ModuleNotFoundError as exc:  # pragma: no cover - depends on the environment
    if exc.name in _WEB_DEPENDENCIES:
        raise RuntimeError(_INSTALL_HINT) from exc
    raise

persistence = _persistence
__all__: List[str] = list(getattr(_persistence, "__all__", ()))


def _load_impl() -> ModuleType:
    global _IMPL_MODULE
    if _IMPL_MODULE is not None:
        return _IMPL_MODULE
    try:
        module = import_module(".application", __name__)
    except ModuleNotFoundError as exc:  # pragma: no cover - depends on the environment
        if exc.name in _WEB_DEPENDENCIES:
            raise RuntimeError(_INSTALL_HINT) from exc
        raise
    _IMPL_MODULE = module
    __all__.extend(name for name in getattr(module, "__all__", ()) if name not in __all__)
    return module


def __getattr__(name: str) -> Any:
    if hasattr(_persistence, name):
        return getattr(_persistence, name)
    return getattr(_load_impl(), name)


def __dir__() -> List[str]:
    return sorted(set(globals()) | set(__all__) | set(dir(_load_impl())))
