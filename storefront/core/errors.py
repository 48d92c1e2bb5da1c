from pydantic import ValidationError as PydanticValidationError

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


class CartError(ValueError):
    """Base for failures reported back to the caller as a message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SessionMissing(CartError):
    def __init__(self, message: str = "Cart session not found"):
        super().__init__(message)


class NotFound(CartError):
    pass


class InsufficientStock(CartError):
    def __init__(self, available: int):
        super().__init__(f"Only {available} items available in stock")
        self.available = available


class InvalidArgument(CartError):
    pass


class ValidationError(CartError):
    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        messages = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ()))
            messages.append(f"{field}: {error['msg']}" if field else error["msg"])
        return cls(". ".join(messages) or "Validation error")


class StaleCartError(CartError):
    def __init__(self, message: str = "Cart was modified concurrently, please try again"):
        super().__init__(message)

