class IntegrationError(Exception):
    """Base error for third-party API calls"""

    status_code = 502

    def __init__(self, service: str, message: str):
        self.service = service
        self.message = message
        super().__init__(f"{service}: {message}")


class IntegrationNotConfigured(IntegrationError):
    status_code = 503

    def __init__(self, service: str):
        super().__init__(service, f"{service} is not configured")


class UpstreamError(IntegrationError):
    status_code = 502
