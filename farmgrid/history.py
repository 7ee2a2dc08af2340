"""Undo/redo stacks of game snapshots."""

import logging

logger = logging.getLogger(__name__)


class History:
    """Past states (newest last) and the redo stack (newest last).

    Every entry is stored as its own copy. The first pushed state is never
    discarded by ``undo``.
    """

    def __init__(self, states=()):
        self.states = [s.copy() for s in states]
        self.redo_stack = []

    def __len__(self):
        return len(self.states)

    @property
    def current(self):
        return self.states[-1] if self.states else None

    @property
    def can_undo(self):
        return len(self.states) > 1

    @property
    def can_redo(self):
        return bool(self.redo_stack)

    def push(self, snapshot):
        self.states.append(snapshot.copy())

    def clear_redo(self):
        self.redo_stack.clear()

    def record(self, snapshot):
        """Push a state produced by a new action, dropping any redo branch."""
        self.clear_redo()
        self.push(snapshot)

    def undo(self):
        """Step back one state and return the state to apply, or ``None``."""
        if not self.can_undo:
            logger.warning("Undo not available.")
            return None
        self.redo_stack.append(self.states.pop())
        return self.states[-1].copy()

    def redo(self):
        """Re-apply the most recently undone state, or return ``None``."""
        if not self.can_redo:
            logger.warning("Redo not available.")
            return None
        snapshot = self.redo_stack.pop()
        self.states.append(snapshot)
        return snapshot.copy()

    def replace(self, states):
        """Swap in a whole new past (explicit load); the redo stack is cleared."""
        if not states:
            raise ValueError("A history needs at least one state")
        self.states = [s.copy() for s in states]
        self.redo_stack = []

    def export(self):
        """Copies of every past state, oldest first."""
        return [s.copy() for s in self.states]
