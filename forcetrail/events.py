class Observer:
    """
    Receives the per-tick event stream of a Simulation.

    Each node passed in carries `id`, `position` and `colour`. Subclasses
    override only the events they care about.
    """

    def node_added(self, node):
        pass

    def node_moved(self, node):
        pass

    def node_removed(self, node):
        pass

    def tick_finished(self, step):
        """Called once per tick, after every node_moved for that tick."""
        pass
