class FormatterError(Exception):
    """Internal formatter failure.

    These point at a mismatch between the formatter and the grammar or parser
    it targets, never at a problem in the formatted source file.
    """


class UnsupportedConstructError(FormatterError):
    # the tree holds something the formatter has no rendering for
    pass


class TokenOffsetError(UnsupportedConstructError):
    def __init__(self, token_id, expected, found=None):
        self.token_id = token_id
        self.expected = tuple(expected)
        self.found = found
        names = "/".join(k.name for k in self.expected) or "any token"
        if found is None:
            msg = f"token {token_id} is out of range, expected {names}"
        else:
            msg = f"token {token_id} is {found.kind.name} {found.text!r} at line {found.line}, expected {names}"
        super().__init__(msg)
