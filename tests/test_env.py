import numpy as np
import pytest

from farmgrid.constants import CELL_BYTES
from farmgrid.env import GameEnv
from farmgrid.policy import _step_toward, _wrapped_delta, policy


@pytest.fixture(scope="module")
def env():
    env = GameEnv(render_mode="rgb_array")
    yield env
    env.close()


def test_spaces(env):
    assert env.observation_space.shape == (7, 7, CELL_BYTES)
    assert env.action_space.nvec.tolist() == [5, 7, 4]


def test_reset_is_seeded(env):
    obs_a, info_a = env.reset(seed=3)
    obs_b, info_b = env.reset(seed=3)
    assert np.array_equal(obs_a, obs_b)
    assert info_a["day"] == 0
    assert info_a["history_depth"] == 1
    assert env.observation_space.contains(obs_a)


def test_observation_is_the_packed_grid(env):
    obs, _ = env.reset(seed=1)
    assert obs[2, 5].tolist()[1:3] == [2, 5]
    assert obs.tobytes() == env.session.grid.tobytes()


def test_plant_advance_undo(env):
    env.reset(seed=5)
    env.session.spawn_weed(3, 3)
    env.step([0, 1, 0])  # clear the spot
    obs, reward, terminated, truncated, info = env.step([0, 1, 0])
    assert obs[3, 3, 0] == 1
    assert reward == 0.0
    assert not terminated and not truncated

    _, _, _, _, info = env.step([0, 0, GameEnv.CMD_ADVANCE_DAY])
    assert info["day"] == 1
    _, _, _, _, info = env.step([0, 0, GameEnv.CMD_UNDO])
    assert info["day"] == 0
    _, _, _, _, info = env.step([0, 0, GameEnv.CMD_REDO])
    assert info["day"] == 1


def test_movement_wraps(env):
    env.reset(seed=0)
    for _ in range(4):
        _, _, _, _, info = env.step([1, 0, 0])
    assert info["farmer_cell"] == [6, 3]


def test_harvest_reward_and_victory(env):
    env.reset(seed=2)
    session = env.session
    session.spawn_weed(3, 3)
    session.reap(3, 3)
    session.plant(3, 3, "Rose")
    for _ in range(5):
        session.advance_day(weather=(1, 6))
    session.harvest_counts[0] = 1  # Sunflower goal already met

    _, reward, terminated, _, info = env.step([0, 1, 0])
    assert info["harvest_counts"][:2] == [1, 1]
    assert terminated
    assert reward == GameEnv.HARVEST_REWARD + GameEnv.VICTORY_REWARD

    _, reward, terminated, _, _ = env.step([0, 0, 1])
    assert terminated and reward == 0.0


def test_render_frame(env):
    env.reset(seed=4)
    frame = env.render()
    assert frame.shape == (env.HEIGHT, env.WIDTH, 3)
    assert frame.dtype == np.uint8


def test_policy_actions_are_valid(env):
    env.reset(seed=8)
    for _ in range(200):
        action = policy(env)
        assert env.action_space.contains(np.array(action, dtype=np.int64))
        _, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            break
    assert env.session.day > 0


def test_policy_reaps_ripe_flower_underfoot(env):
    env.reset(seed=9)
    session = env.session
    session.spawn_weed(3, 3)
    session.reap(3, 3)
    session.plant(3, 3, "Sunflower")
    for _ in range(5):
        session.advance_day(weather=(1, 6))
    assert policy(env) == [0, 1, 0]


def test_policy_plants_most_needed_flower(env):
    env.reset(seed=10)
    session = env.session
    session.spawn_weed(3, 3)
    session.reap(3, 3)
    session.harvest_counts[0] = 1
    session.scenario.update_current_conditions(session.day, session.harvest_counts)
    # Rose is the only unmet goal in the default scenario
    assert policy(env) == [0, 2, 0]


def test_wrapped_steps():
    assert _wrapped_delta(0, 6, 7) == -1
    assert _wrapped_delta(6, 0, 7) == 1
    assert _wrapped_delta(1, 4, 7) == 3
    assert _step_toward(7, (3, 3), (3, 0)) == 3
    assert _step_toward(7, (3, 3), (0, 3)) == 1
    assert _step_toward(7, (0, 3), (6, 3)) == 1
    assert _step_toward(7, (3, 3), (3, 3)) == 0
