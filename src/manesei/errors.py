"""Errors surfaced to the request boundary."""


class AppError(Exception):
    """An error with a description that is safe to show to the user.

    ``cause`` holds the underlying exception. It is logged but never rendered.
    """

    status: int = 500

    def __init__(
        self,
        description: str = "",
        *,
        cause: BaseException | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(description)
        self.description = description
        self.cause = cause
        if status is not None:
            self.status = status

    def __str__(self) -> str:
        if self.cause is None:
            return self.description
        if not self.description:
            return str(self.cause)
        return f"({self.description}) {self.cause}"


class StoreError(AppError):
    """The note store reported a failure."""


class RenderError(AppError):
    """A page template could not be rendered."""


class FormError(AppError):
    """An editor submission could not be understood."""

    status = 400
