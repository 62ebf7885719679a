"""kidpoints web application package with optional dependencies."""
from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Any, List

_IMPL_MODULE: ModuleType | None = None

_OPTIONAL_MODULES = {"fastapi", "starlette", "sqlmodel", "sqlalchemy", "dotenv", "pydantic"}

__all__: List[str] = []


def _load_impl() -> ModuleType:
    global _IMPL_MODULE
    if _IMPL_MODULE is not None:
        return _IMPL_MODULE
    try:
        module = import_module(".application", __name__)
    except ModuleNotFoundError as exc:
        if exc.name in _OPTIONAL_MODULES:
            raise RuntimeError(
                "kidpoints.webapp requires the FastAPI/SQLModel web dependencies. "
                "Install them via `pip install -e .` from the project root."
            ) from exc
        raise
    _IMPL_MODULE = module
    module_all = getattr(module, "__all__", ())
    __all__.extend(name for name in module_all if name not in __all__)
    return module


def __getattr__(name: str) -> Any:
    if name.startswith("__"):
        raise AttributeError(name)
    module = _load_impl()
    try:
        return getattr(module, name)
    except AttributeError:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from None


def __dir__() -> List[str]:
    names = set(globals()) | set(__all__)
    try:
        module = _load_impl()
    except RuntimeError:
        return sorted(names)
    return sorted(names | set(dir(module)))
