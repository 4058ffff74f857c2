class ValidationError(Exception):
    """Exception raised when document validation fails.
    NOTE: Messages in these errors should be shareable to the user.
    Validators may raise this instead of returning a message; Document.valid() records it into errors. """
    
    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(self.message)
