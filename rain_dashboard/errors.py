FETCH_ERROR_MESSAGE = "Erro ao buscar dados meteorológicos"


class FetchError(Exception):
    """Raised when a fetch cycle fails for any reason (HTTP status, network, payload)."""

    def __init__(self, message: str = FETCH_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message
