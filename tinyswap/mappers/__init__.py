"""
Mapping engines.

Modules:
    - base: Command buffer, mapping cycle and dispatcher shared by the mappers
    - linear: 1-D chain mapper (open or cyclic)
    - grid: 2-D grid mapper
    - manual: Fixed placement from a user function
"""
from .base import Mapper, MapperEngine, mapped_command
from .linear import LinearMapper
from .grid import GridMapper
from .manual import ManualMapper

__all__ = ["Mapper", "MapperEngine", "mapped_command", "LinearMapper", "GridMapper", "ManualMapper"]
