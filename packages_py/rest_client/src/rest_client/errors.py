class RESTClientError(Exception):
    """Base exception for request configuration errors."""
    pass

class InvalidMethodError(RESTClientError):
    def __init__(self, method: str):
        msg = f"Unsupported HTTP method '{method}'. Expected one of GET, POST, PUT, PATCH, DELETE"
        super().__init__(msg)
        self.method = method

class MissingMethodError(RESTClientError):
    def __init__(self, url: str):
        msg = f"No HTTP method set for request to '{url}'"
        super().__init__(msg)
        self.url = url

class MissingUrlError(RESTClientError):
    pass

class RequestAlreadyExecutedError(RESTClientError):
    def __init__(self, method: str, url: str):
        msg = f"Request {method} {url} was already executed; create a new RESTClient per request"
        super().__init__(msg)
        self.method = method
        self.url = url
