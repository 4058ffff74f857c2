class SetupError(Exception):
    """Exception raised when a Document class is declared incorrectly, or the database isn't configured."""
    
    def __init__(self, message: str, cls_name: str | None = None):
        self.cls_name = cls_name
        self.message = f"{cls_name}: {message}" if cls_name else message
        super().__init__(self.message)
