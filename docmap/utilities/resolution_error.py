class ResolutionError(Exception):
    """ Raised when an association is accessed and its target Document class cannot be found by name. """

    def __init__(self, type_name: str, association_name: str | None = None):
        self.type_name = type_name
        self.association_name = association_name
        if association_name:
            self.message = f"Could not resolve Document class '{type_name}' for association '{association_name}'."
        else:
            self.message = f"Could not resolve Document class '{type_name}'."
        super().__init__(self.message)
