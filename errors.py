# errors.py


class InvalidConfiguration(ValueError):
    """Raised when a setter gets a mode outside its enumeration or a bad zoom bound/step."""
