"""Variable resolver service.

Expands ``${name}`` tokens in strings using the variables held by a
VariableRegistry.

Resolution is done in two passes over the text:
1. Discovery: collect the distinct registered variables referenced by the text
2. Substitution: replace each token whose variable produced a string value

Between the passes every applicable variable is resolved concurrently, exactly
once per distinct name, however many times it appears. Tokens whose variable is
unknown, inapplicable to the context, produced no string, or failed are left
verbatim (including the ``${...}`` delimiters), so the unresolved placeholder
itself signals what did not resolve.

Example:
    resolver = VariableResolverService(registry)

    command = await resolver.resolve(
        "make -C ${build.directory} ${build.target}",
        {ContextKey.BUILD_TASK: BuildTaskContext(build_configuration="debug")},
    )
"""

import asyncio
import inspect
import logging
import re
from collections.abc import Sequence

from .registry import VariableRegistry
from .variable import Variable, VariableContext

logger = logging.getLogger(__name__)

# ${name}: non-greedy up to the first closing brace, no escaping
VARIABLE_PATTERN = re.compile(r"\$\{(.*?)\}")


class VariableResolverService:
    """Resolve variables in strings.

    The service holds no per-call state; it depends only on the registry's
    lookup contract and can be shared by any number of concurrent callers.
    """

    def __init__(self, registry: VariableRegistry) -> None:
        self._registry = registry

    async def resolve(self, text: str, context: VariableContext | None = None) -> str:
        """Resolve the variables in the given string.

        Args:
            text: String possibly containing ${name} tokens
            context: Resolution context (None is treated as an empty context)

        Returns:
            The string with every resolvable token substituted.
            Never raises because of a variable failing to resolve.
        """
        values = await self.resolve_variables(self.search_variables(text), context)
        if not values:
            return text

        def substitute(match: re.Match[str]) -> str:
            value = values.get(match.group(1))
            return value if value is not None else match.group(0)

        return VARIABLE_PATTERN.sub(substitute, text)

    async def resolve_array(
        self, values: Sequence[str], context: VariableContext | None = None
    ) -> list[str]:
        """Resolve the variables in each string of the given sequence.

        Elements are resolved one after another, each as an independent
        resolve() call, so an element's unresolved tokens never affect the others.

        Returns:
            A new list of the same length and order. Never raises because of a
            variable failing to resolve.
        """
        result: list[str] = []
        for value in values:
            result.append(await self.resolve(value, context))
        return result

    def search_variables(self, text: str) -> list[Variable]:
        """Find the distinct registered variables referenced by the text.

        Unknown names are dropped. Variables are returned in order of first
        appearance.
        """
        found: dict[str, Variable] = {}
        for match in VARIABLE_PATTERN.finditer(text):
            name = match.group(1)
            if name in found:
                continue
            variable = self._registry.get_variable(name)
            if variable is not None:
                found[name] = variable
        return list(found.values())

    async def resolve_variables(
        self, variables: Sequence[Variable], context: VariableContext | None = None
    ) -> dict[str, str]:
        """Resolve the given variables concurrently.

        Variables whose required context keys are missing are skipped.

        Returns:
            Map of variable name to resolved value, containing only the
            variables that produced a string. Never raises.
        """
        if context is None:
            context = {}

        applicable = []
        for variable in variables:
            if variable.applies_to(context):
                applicable.append(variable)
            else:
                logger.debug(
                    f"Skipping variable '{variable.name}': "
                    f"missing context keys {variable.contexts}"
                )

        results = await asyncio.gather(
            *(self._resolve_variable(variable, context) for variable in applicable)
        )

        return {
            variable.name: value
            for variable, value in zip(applicable, results, strict=True)
            if value is not None
        }

    async def _resolve_variable(self, variable: Variable, context: VariableContext) -> str | None:
        """Resolve a single variable, turning every failure into None."""
        if variable.resolve is None:
            return None

        try:
            value = variable.resolve(context)
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            logger.warning(f"Variable '{variable.name}' failed to resolve: {e}")
            return None

        if not isinstance(value, str):
            logger.debug(
                f"Variable '{variable.name}' produced no value (got {type(value).__name__})"
            )
            return None

        return value
