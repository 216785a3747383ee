class InspectError(RuntimeError):
    """Base of every error that ends an inspectalot command."""

    def __init__(self, msg):
        super().__init__(msg)


class ValidationError(InspectError):
    """A required argument was missing or empty."""


class NotFoundError(InspectError):
    """A definition name is not in the loaded definitions."""


class LoadError(InspectError):
    """The images directory or a definition in it could not be read."""


class CycleError(InspectError):
    """Following parents led back to a definition already visited."""

    def __init__(self, chain):
        self.chain = tuple(chain)
        super().__init__("Images inherit in a cycle: " + " -> ".join(self.chain))
