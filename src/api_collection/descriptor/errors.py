class DescriptorError(ValueError):
    """Raised when a descriptor source cannot be read into endpoint descriptors."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")
