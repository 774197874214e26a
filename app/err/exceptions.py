"""Simple wrappers for the failure states a scrape pass can hit"""


class RouterNotOkError(Exception):
    """Exception for non-200/OK responses from router."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message, status_code, payload)
        self.status_code = status_code


class TableNotFoundError(Exception):
    """Exception for a page that came back without the table we scrape."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message, status_code, payload)
