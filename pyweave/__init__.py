# pyweave/__init__.py

"""
PyWeave

Builds live widget trees from declarative ``[element, {attributes}, *children]``
descriptions. Element types, their traits and their symbolic values live in
registries; native construction and reflection go through a toolkit adapter
(headless widgets by default, PySide6 in ``pyweave.qt``).
"""

__version__ = "0.1.0"

# --- Symbolic values and refs ---
from .base import K, Keyword, Ref, to_id

# --- Configuration ---
from .config import Config, get_config

# --- Registries ---
from .registry import NOT_FOUND, Registry, TypeDescriptor
from .traits import Options, Trait, TraitRegistry, TraitResult, install_common_traits

# --- Toolkits ---
from .toolkit import Context, DisplayMetrics, ReflectiveToolkit, Toolkit
from .values import DimensionConverter, resolve_value

# --- Interpreter ---
from .core import Weaver, build, configure, find_widget
from .widgets import default_registry, standard_traits

from .errors import (
    AmbiguousSetter,
    CyclicInheritance,
    MalformedNode,
    NoMatchingConstructor,
    NoMatchingSetter,
    NotRegistered,
    TraitConflict,
    TreeTooDeep,
    UnknownTrait,
    UnresolvedSymbol,
    WeaveError,
)

__all__ = [
    "K", "Keyword", "Ref", "to_id",
    "Config", "get_config",
    "NOT_FOUND", "Registry", "TypeDescriptor",
    "Options", "Trait", "TraitRegistry", "TraitResult", "install_common_traits",
    "Context", "DisplayMetrics", "ReflectiveToolkit", "Toolkit",
    "DimensionConverter", "resolve_value",
    "Weaver", "build", "configure", "find_widget",
    "default_registry", "standard_traits",
    "AmbiguousSetter", "CyclicInheritance", "MalformedNode", "NoMatchingConstructor",
    "NoMatchingSetter", "NotRegistered", "TraitConflict", "TreeTooDeep",
    "UnknownTrait", "UnresolvedSymbol", "WeaveError",
]
