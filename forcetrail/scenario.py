import logging

logger = logging.getLogger(__name__)

# (operation, *args). "steps" runs that many ticks before the next operation.
DEMO_SCRIPT = [
    ("add", 0, (181, 137, 0)),
    ("add", 1, (203, 75, 22)),
    ("add", 2, (220, 50, 47)),
    ("add", 3, (211, 54, 130)),
    ("add", 4, (108, 113, 196)),
    ("steps", 150),
    ("weight", 0, 1, 50.0),
    ("steps", 150),
    ("weight", 1, 2, 200.0),
    ("steps", 150),
    ("weight", 1, 3, 70.0),
    ("steps", 150),
    ("weight", 2, 4, 5000.0),
    ("steps", 150),
    ("weight", 0, 3, 200.0),
    ("steps", 150),
    ("add", 5, (38, 139, 210)),
    ("steps", 150),
    ("add", 6, (42, 161, 152)),
    ("steps", 150),
    ("weight", 5, 6, 60.0),
    ("steps", 150),
    ("add", 7, (133, 153, 0)),
    ("steps", 150),
    ("weight", 6, 7, 200.0),
    ("steps", 150),
    ("weight", 5, 7, 50.0),
    ("steps", 150),
    ("weight", 1, 7, 5000.0),
    ("steps", 400),
]


class ScriptPlayer:
    """
    Plays a script against a Simulation one tick at a time.

    `advance()` applies every pending graph edit, then runs a single tick.
    It returns False once the script is exhausted.
    """

    def __init__(self, simulation, script):
        self.simulation = simulation
        self.ops = list(script)
        self.index = 0
        self.pending_steps = 0

    def apply(self, op):
        name, *args = op
        if name == "add":
            self.simulation.add_node(*args)
        elif name == "remove":
            self.simulation.remove_node(*args)
        elif name == "weight":
            self.simulation.set_weight(*args)
        elif name == "steps":
            self.pending_steps += args[0]
        else:
            raise ValueError(f"unknown script operation {name!r}")

    def advance(self):
        while self.pending_steps == 0:
            if self.index >= len(self.ops):
                return False
            self.apply(self.ops[self.index])
            self.index += 1
        self.simulation.step()
        self.pending_steps -= 1
        return True

    def run(self):
        ticks = 0
        while self.advance():
            ticks += 1
        logger.info(f"Script finished after {ticks} ticks")
        return ticks


def total_ticks(script):
    return sum(op[1] for op in script if op[0] == "steps")
