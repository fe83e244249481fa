from __future__ import annotations

from .errors import ImplementorFileError, InvalidImplementorMap
from .host import Descriptor, HostContext, ImplementorMap, Registrar
from .loader import ImplementorLoader, publish, validate_mapping
from .settings import Settings, load_settings
from .store import STORE, ImplementorStore, TraitImplementors, normalize_trait_path

__all__ = [
    "Descriptor",
    "ImplementorMap",
    "Registrar",
    "HostContext",
    "ImplementorLoader",
    "publish",
    "validate_mapping",
    "ImplementorStore",
    "TraitImplementors",
    "STORE",
    "normalize_trait_path",
    "InvalidImplementorMap",
    "ImplementorFileError",
    "Settings",
    "load_settings",
]
