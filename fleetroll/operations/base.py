"""Operation interface: the unit the sequence engine executes."""

from abc import ABC, abstractmethod


class Operation(ABC):
    """A deployment step.

    ``server`` is ``None`` when the operation runs in the local phase.
    Failures are raised; a normal return means success.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def execute(self, server, status, settings, token):
        pass

    @abstractmethod
    def dry_run(self) -> str:
        """Text describing what execute() would do."""

    def is_valid(self, notification) -> bool:
        return True
