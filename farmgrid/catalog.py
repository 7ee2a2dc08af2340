"""Plant catalog built from a small line-oriented definition language.

    flower Sunflower yellow 3 2 0
    weed crabgrass green

Flowers get IDs 1..F in text order, weeds follow. ID 0 is reserved for
empty soil and never appears in the catalog.
"""

import logging
from collections import namedtuple

from farmgrid.constants import DEFAULT_PLANT_DSL

logger = logging.getLogger(__name__)

PlantType = namedtuple(
    "PlantType", ["name", "color", "sun_requisite", "water_requisite", "vibe_requisite"]
)


class CatalogError(ValueError):
    """A single malformed plant definition."""


def parse_command(line):
    """Parse one DSL line into ``("flower" | "weed", PlantType)``."""
    tokens = line.split()
    if not tokens:
        raise CatalogError("Empty plant definition")
    command = tokens[0].lower()
    if command == "flower":
        if len(tokens) != 6:
            raise CatalogError(
                "Invalid flower command. Usage: flower [name] [color] [sunReq] [waterReq] [vibeReq]"
            )
        name, color = tokens[1], tokens[2]
        try:
            sun, water, vibe = (int(t) for t in tokens[3:6])
        except ValueError:
            raise CatalogError(f"Requisites must be integers: {line!r}") from None
        return "flower", PlantType(name, color, sun, water, vibe)
    if command == "weed":
        if len(tokens) != 3:
            raise CatalogError("Invalid weed command. Usage: weed [name] [color]")
        return "weed", PlantType(tokens[1], tokens[2], 0, 0, 0)
    raise CatalogError(f"Unknown command {tokens[0]!r}. Available commands: flower, weed")


class PlantCatalog:
    """Integer-keyed registry of plant definitions.

    Args:
        flowers: harvestable plant types, in harvest-count order.
        weeds:   plant types that never grow and never count as harvest.
    """

    def __init__(self, flowers, weeds=()):
        self.flowers = tuple(flowers)
        self.weeds = tuple(weeds)
        self._by_id = {i + 1: p for i, p in enumerate(self.flowers + self.weeds)}
        self._ids_by_name = {}
        for plant_id, plant in self._by_id.items():
            self._ids_by_name.setdefault(plant.name.lower(), plant_id)
        self._first_weed_id = len(self.flowers) + 1

    @classmethod
    def from_dsl(cls, text):
        """Build a catalog from DSL text; malformed lines are logged and skipped."""
        flowers, weeds = [], []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                kind, plant = parse_command(line)
            except CatalogError as e:
                logger.warning("Skipping plant definition on line %d: %s", lineno, e)
                continue
            (flowers if kind == "flower" else weeds).append(plant)
        return cls(flowers, weeds)

    @classmethod
    def from_file(cls, path):
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dsl(f.read())

    @classmethod
    def default(cls):
        return cls.from_dsl(DEFAULT_PLANT_DSL)

    def __len__(self):
        return len(self._by_id)

    def get(self, plant_id):
        """Return the ``PlantType`` for ``plant_id``, or ``None`` (empty soil / unknown)."""
        return self._by_id.get(plant_id)

    def id_for(self, name):
        """Case-insensitive name lookup; ``None`` if the name is unknown."""
        if not name:
            return None
        return self._ids_by_name.get(name.strip().lower())

    def is_weed(self, plant_id):
        return plant_id >= self._first_weed_id and plant_id in self._by_id

    def is_flower(self, plant_id):
        return 1 <= plant_id < self._first_weed_id

    def flower_index(self, plant_id):
        """Position of a flower in the harvest-count sequence."""
        if not self.is_flower(plant_id):
            raise KeyError(f"Plant id {plant_id} is not a flower")
        return plant_id - 1

    @property
    def default_weed_id(self):
        """ID of the first weed, used by scripted weed spawns."""
        return self._first_weed_id if self.weeds else None

    def flower_names(self):
        return [p.name for p in self.flowers]
