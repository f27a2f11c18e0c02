class InvalidInput(ValueError):
    """
    Raised when a prediction buffer or image geometry handed to the decoder
    does not match the configured grid / class layout.
    """
