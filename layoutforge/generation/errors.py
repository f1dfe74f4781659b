class GenerationError(Exception):
    """Base class for layout generation failures surfaced to callers."""


class ConfigurationError(GenerationError, ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def to_dict(self):
        return {"error": self.message, "field": self.field}


__all__ = ["GenerationError", "ConfigurationError"]
