# gatekeeper/exceptions.py
"""
Error kinds raised by the config loader, gateway and registry.
main.py maps each one to an HTTP status; the CLI treats config errors as fatal.
"""


class GatekeeperError(Exception):
    """Base class for every error this application raises on purpose."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, detail: str = None):
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class ConfigMissingError(GatekeeperError):
    """config.yaml did not exist; a blank template has been written."""


class ConfigParseError(GatekeeperError):
    """config.yaml could not be read, decoded or coerced."""


class DatabaseUnavailableError(GatekeeperError):
    """Connecting to or talking to the database failed."""


class RegistryError(GatekeeperError):
    """Unexpected persistence failure."""


class VisitorValidationError(GatekeeperError):
    status_code = 400
    message = "Name and plate are required"


class PlateConflictError(GatekeeperError):
    status_code = 409
    message = "Plate already in database"


class PlateNotFoundError(GatekeeperError):
    status_code = 404
    message = "Plate is not found in the database"
