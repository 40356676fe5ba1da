"""
Errors raised while registering element types or weaving a UI tree.

None of these are recovered inside the library: a failed build aborts the
whole tree and the error reaches the caller unchanged.
"""


class WeaveError(Exception):
    """Base class for every error raised by pyweave."""


class NotRegistered(WeaveError, LookupError):
    """An element keyword has no descriptor (or no class) in the registry."""

    def __init__(self, keyword, detail: str = ""):
        self.keyword = keyword
        message = f"The class for {keyword!r} isn't present in the registry."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)


class UnknownTrait(NotRegistered):
    """A type lists a trait id that was never registered."""

    def __init__(self, trait_id):
        self.trait_id = trait_id
        WeaveError.__init__(self, f"No trait registered under {trait_id!r}.")


class MalformedNode(WeaveError, ValueError):
    """A tree node is not ``[keyword, {attributes}, *children]``."""

    def __init__(self, node, reason: str):
        self.node = node
        super().__init__(f"Malformed UI node ({reason}): {node!r}")


class TreeTooDeep(MalformedNode):
    def __init__(self, node, max_depth: int):
        self.max_depth = max_depth
        super().__init__(node, f"nesting exceeds max_depth={max_depth}")


class UnresolvedSymbol(WeaveError, LookupError):
    """A symbolic value has no binding and no matching native constant."""

    def __init__(self, symbol, owner=None, constant=None):
        self.symbol = symbol
        self.owner = owner
        self.constant = constant
        where = f" on {getattr(owner, '__name__', owner)}" if owner is not None else ""
        const = f" (looked for {constant})" if constant else ""
        super().__init__(f"Cannot resolve symbol {symbol!r}{where}{const}.")


class NoMatchingConstructor(WeaveError, TypeError):
    def __init__(self, cls, arg_types):
        self.cls = cls
        self.arg_types = tuple(arg_types)
        names = ", ".join(t.__name__ for t in self.arg_types)
        super().__init__(f"No constructor of {cls.__name__} accepts ({names}).")


class NoMatchingSetter(WeaveError, AttributeError):
    def __init__(self, cls, attribute, value_type):
        self.cls = cls
        self.attribute = attribute
        self.value_type = value_type
        super().__init__(
            f"{cls.__name__} has no setter for {attribute!r} "
            f"accepting {value_type.__name__}."
        )


class AmbiguousSetter(WeaveError, TypeError):
    def __init__(self, cls, attribute, candidates):
        self.cls = cls
        self.attribute = attribute
        self.candidates = tuple(candidates)
        super().__init__(
            f"{cls.__name__} has several setters for {attribute!r}: "
            f"{', '.join(self.candidates)}."
        )


class CyclicInheritance(WeaveError, ValueError):
    def __init__(self, chain):
        self.chain = tuple(chain)
        super().__init__(f"Cyclic element inheritance: {' -> '.join(map(str, self.chain))}")


class TraitConflict(WeaveError, ValueError):
    """A trait declares both a custom predicate and an attribute list."""

    def __init__(self, trait_id, attributes):
        self.trait_id = trait_id
        self.attributes = tuple(attributes)
        super().__init__(
            f"Trait {trait_id!r} has a custom match predicate and an explicit "
            f"attribute list {list(self.attributes)}; the predicate decides matching."
        )
