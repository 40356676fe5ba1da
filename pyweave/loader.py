# pyweave/loader.py
"""
Loads UI trees from YAML.

A tree is written the same way as in Python, as nested lists:

    - linear-layout
    - orientation: :vertical
      id-holder: true
    - [text-view, {id: greeting, text: "Hello", text-size: [18, ":sp"]}]
    - [button, {text: "OK", on-click: !handler ok}]

Strings starting with a colon become :class:`~pyweave.base.Keyword` values
(write ``"::x"`` for the literal string ``":x"``). ``!handler name`` refers
to a callable supplied by the caller when the tree is loaded.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

import yaml

from .base import Keyword
from .errors import MalformedNode, NotRegistered

logger = logging.getLogger(__name__)


class Handler:
    """Placeholder for a ``!handler`` reference until it is bound."""

    def __init__(self, name: str):
        self.name = name

    def __eq__(self, other):
        return isinstance(other, Handler) and other.name == self.name

    def __hash__(self):
        return hash((Handler, self.name))

    def __repr__(self):
        return f"Handler({self.name!r})"


class TreeLoader(yaml.SafeLoader):
    """SafeLoader that understands the ``!handler`` tag."""


def _construct_handler(loader: TreeLoader, node: yaml.Node) -> Handler:
    return Handler(loader.construct_scalar(node))


TreeLoader.add_constructor("!handler", _construct_handler)


def keywordize(data: Any) -> Any:
    """Turns ``":name"`` strings into keywords throughout a loaded structure."""
    if isinstance(data, str):
        if data.startswith("::"):
            return data[1:]
        if data.startswith(":") and len(data) > 1:
            return Keyword(data)
        return data
    if isinstance(data, list):
        return [keywordize(item) for item in data]
    if isinstance(data, dict):
        return {key: keywordize(value) for key, value in data.items()}
    return data


def bind_handlers(data: Any, handlers: Mapping[str, Callable],
                  fallback: Optional[Callable[[str], Callable]] = None) -> Any:
    """
    Replaces every :class:`Handler` with ``handlers[name]``. Unknown names
    are passed to ``fallback`` when given, else they raise NotRegistered.
    """
    if isinstance(data, Handler):
        if data.name in handlers:
            return handlers[data.name]
        if fallback is not None:
            return fallback(data.name)
        raise NotRegistered(data.name, "No handler with this name was supplied.")
    if isinstance(data, list):
        return [bind_handlers(item, handlers, fallback) for item in data]
    if isinstance(data, dict):
        return {key: bind_handlers(value, handlers, fallback) for key, value in data.items()}
    return data


def loads(text: str, handlers: Optional[Mapping[str, Callable]] = None,
          fallback: Optional[Callable[[str], Callable]] = None):
    """Parses a YAML document into a tree ready for ``Weaver.build``."""
    data = yaml.load(text, Loader=TreeLoader)
    if not isinstance(data, list):
        raise MalformedNode(data, "a YAML tree must be a list")
    return bind_handlers(keywordize(data), handlers or {}, fallback)


def load(path: Union[str, Path], handlers: Optional[Mapping[str, Callable]] = None,
         fallback: Optional[Callable[[str], Callable]] = None):
    path = Path(path)
    logger.debug("Loading UI tree from %s", path)
    return loads(path.read_text(encoding="utf-8"), handlers, fallback)
