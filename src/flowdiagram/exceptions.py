"""Exceptions for flowdiagram layout and rendering."""

from __future__ import annotations


class InvalidGraphError(ValueError):
    """Snapshot cannot be laid out.

    Raised for structural problems the upstream producer is responsible
    for: unknown link endpoints, duplicate node ids, cycles, and
    non-positive or non-finite values.

    Attributes:
        message: Human-readable error message
        node_id: Optional id of the offending node
    """

    def __init__(self, message: str, *, node_id: str | None = None) -> None:
        self.message = message
        self.node_id = node_id
        super().__init__(message)


class DuplicateKeyError(Exception):
    """Identity key strategy mapped two entities to the same key.

    Attributes:
        collection: Name of the element collection ("nodes", "links", "labels")
        key: The colliding key
        message: Human-readable error message
    """

    def __init__(
        self,
        collection: str,
        key: object,
        message: str | None = None,
    ) -> None:
        self.collection = collection
        self.key = key
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        return (
            f"Duplicate identity key {self.key!r} in '{self.collection}'.\n\n"
            f"How to fix:\n"
            f"  Use a key strategy based on an attribute that is unique "
            f"within a snapshot (e.g. the node id)"
        )


class ChannelError(RuntimeError):
    """Misuse of a DiagramChannel (second subscriber, send after close)."""


class KeyStrategyError(LookupError):
    """Identity key strategy could not produce a key for a node.

    Attributes:
        node_id: Id of the node that could not be keyed
        attribute: Attribute or data entry the strategy looked for
    """

    def __init__(self, node_id: str, attribute: str) -> None:
        self.node_id = node_id
        self.attribute = attribute
        super().__init__(
            f"Node '{node_id}' has no attribute or data entry '{attribute}' to key on.\n\n"
            f"How to fix:\n"
            f"  Add '{attribute}' to every node, or key on a field all nodes carry (e.g. the node id)"
        )
