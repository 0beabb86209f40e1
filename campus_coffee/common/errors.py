"""Domain errors and failure typing."""


class CampusCoffeeError(Exception):
    """Base class for application failures."""

    error_code = "CAMPUS_COFFEE_ERROR"


class ConfigError(CampusCoffeeError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class DomainError(CampusCoffeeError):
    """Raised for POS domain failures reported back to the caller."""

    error_code = "DOMAIN_ERROR"


class OsmNodeNotFoundError(DomainError):
    """Raised when an OSM node cannot be fetched or parsed."""

    error_code = "OSM_NODE_NOT_FOUND"

    def __init__(self, node_id: int) -> None:
        super().__init__(f"The OpenStreetMap node with ID {node_id} does not exist.")
        self.node_id = node_id


class OsmNodeMissingFieldsError(DomainError):
    """Raised when an OSM node's tags do not satisfy the POS mapping rules."""

    error_code = "OSM_NODE_MISSING_FIELDS"

    def __init__(self, node_id: int, detail: str | None = None) -> None:
        message = f"The OpenStreetMap node with ID {node_id} does not have the required fields."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
        self.node_id = node_id
        self.detail = detail


class DuplicatePosNameError(DomainError):
    """Raised when a POS name is already taken by another record."""

    error_code = "DUPLICATE_POS_NAME"

    def __init__(self, name: str) -> None:
        super().__init__(f"POS with name '{name}' already exists.")
        self.name = name


class PosNotFoundError(DomainError):
    error_code = "POS_NOT_FOUND"

    def __init__(self, pos_id: int) -> None:
        super().__init__(f"POS with ID {pos_id} does not exist.")
        self.pos_id = pos_id
