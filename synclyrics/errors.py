class LrcParseError(ValueError):
    pass


class MalformedTagError(LrcParseError):
    """A tag has the bracket shape of a timestamp/offset but a bad field."""
