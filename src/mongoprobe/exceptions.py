class ProbeException(Exception):
    """Base Exception Class"""
    pass

class ConnectionError(ProbeException):
    """Connection Failure (unreachable host, refused connection, auth/handshake failure)"""
    pass

class QueryError(ProbeException):
    """Stats request failed after connecting"""
    pass

class ConfigurationError(ProbeException):
    """Configuration Error"""
    pass
