"""Custom exception hierarchy for the assistant."""


class AssistantError(Exception):
    """Base exception for assistant-level issues."""


class ConfigurationError(AssistantError):
    """Raised when configuration is invalid or missing."""


class TransportError(AssistantError):
    """Raised when the completion service cannot be reached or answers with an error."""


class SerializationError(AssistantError):
    """Raised when JSON from or to the completion service, or tool input, is malformed."""


class ToolError(AssistantError):
    """Base class for failures scoped to a single tool call."""


class ToolNotFound(ToolError):
    """Raised when a tool name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool `{name}` not found")
        self.name = name


class ToolExecutionError(ToolError):
    """Raised when the process or file work inside a tool fails."""


class UserRejected(ToolError):
    """Terminal outcome of a tool call the user declined at the approval gate."""

    MESSAGE = "User rejected tool call"

    def __init__(self, name: str | None = None) -> None:
        super().__init__(self.MESSAGE)
        self.name = name


class ToolRegistrationError(AssistantError):
    """Raised when two tools claim the same name."""


class CommandParseError(AssistantError):
    """Raised when a console control command is malformed."""


class ConversationNotFound(AssistantError):
    """Raised when a persisted conversation id does not exist."""
