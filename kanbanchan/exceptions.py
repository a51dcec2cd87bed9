"""
kanbanchan - Custom Exceptions
"""
import structlog

logger = structlog.get_logger('exceptions')


class KanbanchanException(Exception):
    """Base exception for kanbanchan"""
    def __init__(self, message: str, code: str = "KANBANCHAN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self):
        return {
            'error': True,
            'code': self.code,
            'message': self.message
        }


class TransportException(KanbanchanException):
    """Network or HTTP failure talking to an external service"""
    def __init__(self, message: str, code: str = "TRANSPORT_ERROR"):
        super().__init__(message, code=code)
        logger.error(f"Transport error: {message}")


class TimeoutException(TransportException):
    """An external call exceeded its deadline"""
    def __init__(self, message: str):
        super().__init__(message, code="TIMEOUT_ERROR")


class DecodeException(KanbanchanException):
    """Response body could not be decoded into the expected shape"""
    def __init__(self, message: str):
        super().__init__(message, code="DECODE_ERROR")
        logger.error(f"Decode error: {message}")


class NotFoundException(KanbanchanException):
    """Catalog lookup for an unknown app id"""
    def __init__(self, message: str):
        super().__init__(message, code="NOT_FOUND")
        logger.warning(f"Not found: {message}")


class ValidationException(KanbanchanException):
    """Workspace record is missing an expected field or has the wrong type"""
    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")
        logger.warning(f"Validation error: {message}")


class ConfigurationException(KanbanchanException):
    """Settings are missing or invalid"""
    def __init__(self, message: str):
        super().__init__(message, code="CONFIG_ERROR")
        logger.error(f"Configuration error: {message}")


class SyncException(KanbanchanException):
    """A reconciliation pass was aborted"""
    def __init__(self, message: str, entity: str = None):
        self.entity = entity
        super().__init__(message, code="SYNC_ERROR")
        logger.error(f"Sync aborted: {message}", entity=entity)

    def to_dict(self):
        data = super().to_dict()
        data['entity'] = self.entity
        return data
