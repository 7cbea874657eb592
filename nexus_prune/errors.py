class NexusPruneError(Exception):
    pass


class ConfigurationError(NexusPruneError):
    """A required setting is missing or invalid."""


class FetchError(NexusPruneError):
    """A single component listing request failed."""


class PageCeilingExceeded(NexusPruneError):
    """The listing kept returning continuation tokens past the page limit."""


class DeleteError(NexusPruneError):
    def __init__(self, component_id: str, message: str):
        super().__init__(f"Failed to delete component {component_id}: {message}")
        self.component_id = component_id
