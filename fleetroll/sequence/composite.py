"""Sequence tree: ordered, nestable, optionally conditional groups of operations."""

import logging

from fleetroll.operations.evaluator import ScriptEvaluator
from fleetroll.reporting import INDENT

logger = logging.getLogger(__name__)


class CompositeSequence:
    """Named, ordered group of operations and nested composites.

    Nodes are only ever created and appended by their parent's builder
    methods, so the structure is always a tree.
    """

    def __init__(self, name, evaluator=None):
        self._name = name
        self._sequence = []
        self.evaluator = evaluator

    @property
    def name(self) -> str:
        return self._name

    @property
    def title(self) -> str:
        """Heading used when rendering this node."""
        return self._name

    @property
    def children(self) -> list:
        return list(self._sequence)

    def add(self, operation, add_first=False):
        if add_first:
            self._sequence.insert(0, operation)
        else:
            self._sequence.append(operation)

    def new_composite_sequence(self, name):
        seq = CompositeSequence(name, evaluator=self.evaluator)
        self._sequence.append(seq)
        return seq

    def new_conditional_composite_sequence(self, condition=None, condition_script=None, name=None):
        """Append a composite that only runs when its gate holds.

        Args:
            condition: callable(server) -> bool, evaluated per server at execution time.
            condition_script: script handed to the script evaluator instead.
            name: section name; defaults to this sequence's name.
        """
        seq = ConditionalCompositeSequence(
            name or self._name,
            condition=condition,
            condition_script=condition_script,
            evaluator=self.evaluator,
        )
        self._sequence.append(seq)
        return seq

    async def execute(self, server, status, settings, token):
        with status.section(self.title) as section:
            await self._execute_children(server, section, settings, token)

    async def _execute_children(self, server, status, settings, token):
        for element in self._sequence:
            token.raise_if_cancelled()

            if isinstance(element, CompositeSequence):
                await element.execute(server, status, settings, token)
            else:
                with status.section(element.name) as section:
                    await element.execute(server, section, settings, token)

    def dry_run(self, depth=0) -> list[str]:
        """Render the subtree below this node without side effects."""
        lines = []
        for item in self._sequence:
            if isinstance(item, CompositeSequence):
                lines.append(f"{INDENT * depth}{item.title}")
                lines.extend(item.dry_run(depth + 1))
            else:
                lines.append(f"{INDENT * depth}{item.name}")
                lines.append(f"{INDENT * (depth + 1)}{item.dry_run()}")
        return lines

    def is_valid(self, notification) -> bool:
        # Every child is asked so all diagnostics end up in the notification.
        results = [item.is_valid(notification) for item in self._sequence]
        return all(results)


class ConditionalCompositeSequence(CompositeSequence):
    """Composite gated by a per-server predicate or a condition script."""

    def __init__(self, name, condition=None, condition_script=None, evaluator=None):
        if (condition is None) == (condition_script is None):
            raise ValueError("Exactly one of condition or condition_script must be given")
        super().__init__(name, evaluator=evaluator)
        self.condition = condition
        self.condition_script = condition_script

    @property
    def title(self) -> str:
        if self.condition_script is not None:
            return f"{self._name} (when: {self.condition_script})"
        label = getattr(self.condition, "description", None) or getattr(self.condition, "__name__", "predicate")
        return f"{self._name} (when: {label})"

    async def _gate(self, server) -> bool:
        if self.condition is not None:
            return bool(self.condition(server))
        evaluator = self.evaluator or ScriptEvaluator()
        result = await evaluator.evaluate(server, self.condition_script)
        logger.debug(f"Condition [{self.condition_script}] for [{self._name}]: {result}")
        return result

    async def execute(self, server, status, settings, token):
        if not await self._gate(server):
            status.info(f"Condition not met, skipping [{self._name}]")
            return
        await super().execute(server, status, settings, token)


class LocalSequence(CompositeSequence):
    """Top-level sequence of the local phase. Runs once, without a server."""

    async def execute(self, status, settings, token):
        await super().execute(None, status, settings, token)


class RemoteSequence(CompositeSequence):
    """Top-level sequence of the remote phase, run once per server.

    ``parallel`` is recorded but has no effect on execution.
    """

    def __init__(self, name, parallel=False, evaluator=None):
        super().__init__(name, evaluator=evaluator)
        self.parallel = parallel
