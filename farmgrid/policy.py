from farmgrid.weather import is_harvest_ready


def policy(env):
    # Strategy: reap whatever stands under the farmer once it is harvest-ready (or a weed),
    # otherwise walk the shortest wrapped path to the nearest ripe flower, moving
    # horizontally first. On empty soil, plant the flower the scenario still needs most.
    # With nothing else to do, let a day pass.
    session = env.session
    row, col = session.farmer.cell_position
    cell = session.current_cell()

    if cell.plant_id and (
        session.catalog.is_weed(cell.plant_id) or is_harvest_ready(cell, session.max_growth)
    ):
        return [0, 1, 0]  # Reap

    target = _nearest_ready(session, row, col)
    if target is not None:
        return [_step_toward(session.size, (row, col), target), 0, 0]

    if cell.plant_id == 0:
        return [0, 1 + _most_needed_flower(session), 0]  # Plant

    return [0, 0, env.CMD_ADVANCE_DAY]


def _wrapped_delta(src, dst, size):
    forward = (dst - src) % size
    return forward if forward <= size // 2 else forward - size


def _nearest_ready(session, row, col):
    best, best_dist = None, None
    for r in range(session.size):
        for c in range(session.size):
            cell = session.get_cell(r, c)
            if not session.catalog.is_flower(cell.plant_id):
                continue
            if not is_harvest_ready(cell, session.max_growth):
                continue
            dist = abs(_wrapped_delta(row, r, session.size)) + abs(_wrapped_delta(col, c, session.size))
            if best_dist is None or dist < best_dist:
                best, best_dist = (r, c), dist
    return best


def _step_toward(size, pos, target):
    dy = _wrapped_delta(pos[0], target[0], size)
    dx = _wrapped_delta(pos[1], target[1], size)
    if dx > 0:
        return 4  # Move right
    elif dx < 0:
        return 3  # Move left
    elif dy > 0:
        return 2  # Move down
    elif dy < 0:
        return 1  # Move up
    return 0


def _most_needed_flower(session):
    flower_count = len(session.catalog.flowers)
    shortfalls = [goal - have for goal, have in session.scenario.progress()][:flower_count]
    if not shortfalls or max(shortfalls) <= 0:
        return 0
    return shortfalls.index(max(shortfalls))
