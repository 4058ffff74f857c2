class CascadeDepthError(Exception):
    """ Raised when saving walks a parent chain deeper than the allowed nesting depth. Usually a sign of a parent cycle. """

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        self.message = f"Parent chain exceeded the maximum nesting depth of {max_depth} while looking for the root document."
        super().__init__(self.message)
