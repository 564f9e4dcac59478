# gravity_shift/tests/helpers.py
import random


class ConstRandom(random.Random):
    """random() always returns the same value: every spawn decision is fixed."""
    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value
