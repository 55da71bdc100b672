from .errors import DuplicateNameError, PluginOrderError, RegistryFrozenError
from .cli_logger import logger


class PluginRegistry:
    """
    Ordered set of plugin activations.

    Insertion order is the activation order handed to the merger. The registry
    is filled during a setup phase and frozen before the first merge; it must
    not be shared between threads while still open.
    """

    def __init__(self):
        self._activations = []
        self._index = {}
        self._frozen = False

    @classmethod
    def from_activations(cls, activations):
        registry = cls()
        for activation in activations:
            registry.register(activation)
        return registry

    def register(self, activation):
        if self._frozen:
            raise RegistryFrozenError(activation.name)
        if activation.name in self._index:
            raise DuplicateNameError(activation.name)

        if activation.ordered:
            # An ordered plugin already registered may have declared that it
            # runs after this one.
            for earlier in self._activations:
                if earlier.ordered and activation.name in earlier.after:
                    raise PluginOrderError(activation.name, earlier.name)

        self._index[activation.name] = len(self._activations)
        self._activations.append(activation)
        logger.debug(f"Registered plugin '{activation.name}' at position {len(self._activations)}")

    def freeze(self):
        if not self._frozen:
            self._frozen = True
            logger.debug(f"Plugin registry frozen with {len(self._activations)} plugin(s)")
        return self.activations()

    @property
    def frozen(self):
        return self._frozen

    def activations(self):
        return tuple(self._activations)

    def get(self, name):
        position = self._index.get(name)
        return None if position is None else self._activations[position]

    def __contains__(self, name):
        return name in self._index

    def __iter__(self):
        return iter(self.activations())

    def __len__(self):
        return len(self._activations)
