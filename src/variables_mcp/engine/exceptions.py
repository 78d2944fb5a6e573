"""Custom exceptions for variable resolution.

Exception Hierarchy:
    VariableError (base)
    ├── QuickPickCancelledError (interactive choice abandoned)
    │   └── QuickPickUnavailableError (no prompt bound to the current task)
    ├── BuildManagerError (target enumeration failure)
    └── BuildConfigError (invalid build configuration file)

None of these escape VariableResolverService.resolve(): the resolver catches
them per variable and leaves the corresponding token unresolved.

Example:
    >>> try:
    ...     value = await variable.resolve(context)
    ... except QuickPickCancelledError:
    ...     value = None  # user dismissed the picker
"""


class VariableError(Exception):
    """Base exception for all variable-related errors."""

    pass


class QuickPickCancelledError(VariableError):
    """Exception raised when an interactive choice is abandoned.

    Cancellation is a terminal outcome distinct from choosing an empty value:
    the "No target" item resolves to "", dismissing the picker raises this.

    Attributes:
        placeholder: Placeholder text of the abandoned prompt
        reason: Why the prompt ended without a selection
    """

    def __init__(self, placeholder: str, reason: str = "Abort") -> None:
        """Initialize QuickPickCancelledError.

        Args:
            placeholder: Placeholder text of the abandoned prompt
            reason: Why the prompt ended without a selection
        """
        self.placeholder = placeholder
        self.reason = reason

        super().__init__(f"Quick pick '{placeholder}' cancelled: {reason}")

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"QuickPickCancelledError(placeholder={self.placeholder!r}, reason={self.reason!r})"


class QuickPickUnavailableError(QuickPickCancelledError):
    """Exception raised when no quick pick service is bound to the current task.

    Treated exactly like a cancellation by the resolver.
    """

    def __init__(self, placeholder: str) -> None:
        super().__init__(placeholder, reason="no interactive prompt available")


class BuildManagerError(VariableError):
    """Exception raised when build targets cannot be enumerated.

    Attributes:
        configuration: Build configuration name (None for the active one)
        details: Detailed error information

    Example:
        >>> raise BuildManagerError(
        ...     configuration="release",
        ...     details="Unknown build configuration"
        ... )
    """

    def __init__(self, configuration: str | None, details: str) -> None:
        """Initialize BuildManagerError.

        Args:
            configuration: Build configuration name (None for the active one)
            details: Detailed error information
        """
        self.configuration = configuration
        self.details = details

        label = configuration if configuration is not None else "<active>"
        super().__init__(f"Build configuration '{label}' error: {details}")


class BuildConfigError(VariableError):
    """Exception raised when the build configuration file is invalid.

    Attributes:
        path: Path of the offending configuration file
        details: Parse or validation error
    """

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details

        super().__init__(f"Failed to load build config from {path}: {details}")
