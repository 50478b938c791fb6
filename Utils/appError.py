class AppError(Exception):
    def __init__(self, message: str, status_code: int, errors=None):
        """
        Operational error raised by controllers and rendered as JSON.

        Args:
            message (str): Human readable error message.
            status_code (int): HTTP status code returned to the client.
            errors (list | None): Optional field level details.
        """
        super().__init__(message)

        self.status_code = status_code
        self.status = "fail" if str(status_code).startswith("4") else "error"
        self.errors = errors or []
        self.is_operational = True

    def to_dict(self) -> dict:
        payload = {
            "success": False,
            "status": self.status,
            "message": str(self),
        }
        if self.errors:
            payload["errors"] = self.errors
        return payload
