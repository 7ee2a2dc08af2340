"""Grid farming game engine.

Exports the main classes so consumers can do::

    from farmgrid import GameSession, PlantCatalog, Scenario
"""

from .catalog import PlantCatalog, PlantType
from .cells import Cell, load_cell, store_cell
from .scenario import Scenario
from .session import GameSession
from .snapshot import GameSnapshot
from .weather import Weather
