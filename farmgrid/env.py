import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame
import os
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from farmgrid.catalog import PlantCatalog
from farmgrid.constants import CELL_BYTES, CELL_SIZE, DEFAULT_SCENARIO, GAME_SIZE
from farmgrid.scenario import Scenario
from farmgrid.session import GameSession


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"]}

    # Must be a short, user-facing control string:
    user_guide = (
        "Controls: Arrows move the farmer (edges wrap). Interact plants the chosen flower on "
        "empty soil or reaps the plant underfoot. Commands: next day, undo, redo."
    )

    # Must be a short, user-facing description of the game:
    game_description = (
        "Tend a small flower farm. Weather changes every day; plants grow when they get "
        "enough sun and water. Harvest the flowers the scenario asks for to win."
    )

    # Should frames auto-advance or wait for user input?
    auto_advance = False

    # --- Game Constants ---
    MAX_DAYS = 100
    HARVEST_REWARD = 1
    VICTORY_REWARD = 10
    UI_HEIGHT = 40

    # movement index -> farmer direction
    MOVES = {1: "N", 2: "S", 3: "W", 4: "E"}

    # commands
    CMD_NONE, CMD_ADVANCE_DAY, CMD_UNDO, CMD_REDO = 0, 1, 2, 3

    # Colors
    COLOR_BG = (34, 40, 49)
    COLOR_SOIL = (139, 69, 19)
    COLOR_GRID = (87, 56, 34)
    COLOR_FARMER = (40, 80, 220)
    COLOR_OUTLINE = (0, 0, 0)
    COLOR_TEXT = (238, 238, 238)
    COLOR_READY = (255, 211, 105)

    def __init__(self, render_mode="rgb_array", size=GAME_SIZE, catalog=None, scenario_config=None):
        super().__init__()
        self.render_mode = render_mode
        self.size = size
        self.catalog = catalog if catalog is not None else PlantCatalog.default()
        self.scenario_config = scenario_config if scenario_config is not None else DEFAULT_SCENARIO
        self.flower_names = self.catalog.flower_names()

        self.WIDTH = self.size * CELL_SIZE
        self.HEIGHT = self.size * CELL_SIZE + self.UI_HEIGHT

        # EXACT spaces:
        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.size, self.size, CELL_BYTES), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 1 + len(self.flower_names), 4])

        # Pygame setup
        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.WIDTH, self.HEIGHT))
        self.font_small = pygame.font.Font(None, 22)

        # Game state variables
        self.session = None
        self.steps = None
        self.game_over = None

        self.reset()

        self.validate_implementation()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        self.session = GameSession.new_game(
            size=self.size,
            catalog=self.catalog,
            scenario=Scenario.from_dict(self.scenario_config),
            rng=self.np_random,
            cell_size=CELL_SIZE,
        )
        self.steps = 0
        self.game_over = False

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game_over:
            return self._get_observation(), 0.0, True, False, self._get_info()

        # Unpack factorized action
        movement = int(action[0])  # 0-4: none/up/down/left/right
        choice = int(action[1])    # 0: no interact, k: interact with flower k-1
        command = int(action[2])   # none/advance day/undo/redo

        harvested_before = sum(self.session.harvest_counts)

        # --- 1. Move ---
        if movement in self.MOVES:
            self.session.move(self.MOVES[movement])

        # --- 2. Interact ---
        if choice > 0:
            self.session.interact(plant_name=self.flower_names[choice - 1], confirm=True)

        # --- 3. Commands ---
        if command == self.CMD_ADVANCE_DAY:
            self.session.advance_day()
        elif command == self.CMD_UNDO:
            self.session.undo()
        elif command == self.CMD_REDO:
            self.session.redo()

        self.steps += 1

        reward = self.HARVEST_REWARD * (sum(self.session.harvest_counts) - harvested_before)
        terminated = self.session.victory
        if terminated:
            reward += self.VICTORY_REWARD
            self.game_over = True
        truncated = self.session.day >= self.MAX_DAYS

        return (
            self._get_observation(),
            float(reward),
            bool(terminated),
            bool(truncated),
            self._get_info(),
        )

    def _get_observation(self):
        return self.session.grid.reshape(self.size, self.size, CELL_BYTES).copy()

    def _get_info(self):
        return {
            "day": self.session.day,
            "weather": self.session.weather_condition.name.lower(),
            "weather_degree": self.session.weather_degree,
            "harvest_counts": list(self.session.harvest_counts),
            "farmer_cell": list(self.session.farmer.cell_position),
            "victory": self.session.victory,
            "history_depth": len(self.session.history),
            "steps": self.steps,
        }

    def render(self):
        self.screen.fill(self.COLOR_BG)
        self._render_game()
        self._render_ui()

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _plant_color(self, plant):
        try:
            return pygame.Color(plant.color)
        except ValueError:
            return pygame.Color(255, 255, 255)

    def _render_game(self):
        session = self.session
        for row in range(self.size):
            for col in range(self.size):
                rect = pygame.Rect(col * CELL_SIZE, self.UI_HEIGHT + row * CELL_SIZE, CELL_SIZE, CELL_SIZE)
                pygame.draw.rect(self.screen, self.COLOR_SOIL, rect)
                pygame.draw.rect(self.screen, self.COLOR_GRID, rect, 1)

                cell = session.get_cell(row, col)
                plant = self.catalog.get(cell.plant_id)
                if plant is None:
                    continue

                # Size increases with growth; weeds are drawn full size
                if self.catalog.is_weed(cell.plant_id):
                    growth_ratio = 1.0
                else:
                    growth_ratio = 0.3 + 0.7 * min(1.0, cell.growth_level / session.max_growth)
                plant_size = int(CELL_SIZE * 0.8 * growth_ratio)
                plant_rect = pygame.Rect(0, 0, plant_size, plant_size)
                plant_rect.center = rect.center
                pygame.draw.rect(self.screen, self._plant_color(plant), plant_rect, border_radius=4)

                if cell.growth_level >= session.max_growth and self.catalog.is_flower(cell.plant_id):
                    pygame.draw.rect(self.screen, self.COLOR_READY, rect, 3)

        # Draw farmer
        farmer = session.farmer
        center = (int(farmer.x), int(farmer.y) + self.UI_HEIGHT)
        pygame.draw.circle(self.screen, self.COLOR_FARMER, center, CELL_SIZE // 4)
        pygame.draw.circle(self.screen, self.COLOR_OUTLINE, center, CELL_SIZE // 4, 2)

    def _render_ui(self):
        session = self.session
        weather = session.weather_condition.name.capitalize()
        text = f"Day {session.day}   {weather} {session.weather_degree}"
        text_surf = self.font_small.render(text, True, self.COLOR_TEXT)
        self.screen.blit(text_surf, (10, 4))

        harvest = ", ".join(
            f"{name}: {have}/{goal}"
            for name, (goal, have) in zip(self.flower_names, session.scenario.progress())
            if goal
        )
        harvest_surf = self.font_small.render(harvest, True, self.COLOR_TEXT)
        self.screen.blit(harvest_surf, (10, 22))

    def validate_implementation(self):
        '''
        Call this at the end of __init__ to verify implementation:
        '''
        # Test action space
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 1 + len(self.flower_names), 4]

        # Test observation space
        test_obs = self._get_observation()
        assert test_obs.shape == (self.size, self.size, CELL_BYTES)
        assert test_obs.dtype == np.uint8

        # Test reset
        obs, info = self.reset()
        assert obs.shape == (self.size, self.size, CELL_BYTES)
        assert isinstance(info, dict)

        # Test step
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.size, self.size, CELL_BYTES)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert isinstance(trunc, bool)
        assert isinstance(info, dict)

        # Test render
        frame = self.render()
        assert frame.shape == (self.HEIGHT, self.WIDTH, 3)

        self.reset()

    def close(self):
        pygame.quit()


if __name__ == "__main__":
    from farmgrid.policy import policy

    env = GameEnv(render_mode="rgb_array")
    obs, info = env.reset(seed=0)

    terminated = truncated = False
    total_reward = 0.0
    while not (terminated or truncated):
        obs, reward, terminated, truncated, info = env.step(policy(env))
        total_reward += reward

    print(f"Finished on day {info['day']} after {info['steps']} steps. "
          f"Harvest: {info['harvest_counts']} Victory: {info['victory']} Reward: {total_reward}")
    env.close()
