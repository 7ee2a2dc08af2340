import pytest

from farmgrid.catalog import PlantCatalog
from farmgrid.scenario import Scenario
from farmgrid.session import GameSession

TWO_FLOWER_DSL = """flower Sunflower yellow 3 2 0
flower Rose pink 2 3 0
weed crabgrass green"""


class StubRng:
    """Deterministic stand-in for ``numpy.random.Generator``.

    ``random()`` always returns ``value``; ``integers(low, high)`` returns ``low``.
    With the default 0.5 a fresh farm has no weeds, sunny days dry the soil,
    and rainy days let half the sunlight through.
    """

    def __init__(self, value=0.5):
        self.value = value

    def random(self):
        return self.value

    def integers(self, low, high=None):
        return low


@pytest.fixture
def catalog():
    return PlantCatalog.from_dsl(TWO_FLOWER_DSL)


@pytest.fixture
def make_scenario():
    def _make(events=(), starting=(0, 3), goal=(1, 0)):
        return Scenario.from_dict(
            {"events": list(events), "startingConditions": list(starting), "victoryConditions": list(goal)}
        )
    return _make


@pytest.fixture
def make_session(catalog, make_scenario):
    def _make(events=(), goal=(1, 0), rng=None, **kwargs):
        return GameSession.new_game(
            size=7,
            catalog=catalog,
            scenario=make_scenario(events=events, goal=goal),
            rng=rng if rng is not None else StubRng(),
            max_growth=5,
            **kwargs,
        )
    return _make


@pytest.fixture
def session(make_session):
    return make_session()
