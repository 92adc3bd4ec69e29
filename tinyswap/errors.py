"""Exceptions raised by the mapping engines."""


class MapperError(Exception):
    """Base class for every mapper failure."""


class MappingConfigError(MapperError, ValueError):
    """Invalid construction parameters or an invalid mapping assignment."""


class MapperCapacityError(MapperError, RuntimeError):
    """A mapping cycle finished without dispatching any buffered command."""


class InvalidCommandError(MapperError, ValueError):
    """Command the mapper cannot place (zero or more than two qubits)."""

    def __init__(self, cmd):
        super().__init__(f"Invalid command (number of qubits): {cmd}")
        self.cmd = cmd
