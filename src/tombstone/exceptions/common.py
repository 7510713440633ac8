class TombstoneError(Exception):
    """Base class for errors raised by tombstone itself."""


class NotFoundError[PKType](TombstoneError):
    """No row with the requested identifier is visible to the operation."""

    def __init__(self, entity_name: str, entity_id: PKType) -> None:
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(f'Entity not found: {entity_name} with id {entity_id}')
