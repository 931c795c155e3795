class TemplateError(Exception):
    """Base class for all template building and rendering errors."""

    pass


class TemplateTypeError(TemplateError, TypeError):
    """Raised when a value cannot be used as a getter."""

    pass


class UnsupportedContentError(TemplateTypeError):
    """Raised when content is neither text, a number, a date, a callable,
    a sequence of those, nor (for tags) an attribute mapping."""

    def __init__(self, value: object, where: str = "content"):
        self.value = value
        self.where = where
        super().__init__(
            f"Unsupported {where} of type {type(value).__name__}: {value!r}"
        )


class DescriptorError(TemplateError, ValueError):
    """Raised on a malformed tag descriptor (expected 'tag#id.class')."""

    def __init__(self, descriptor: str):
        self.descriptor = descriptor
        super().__init__(
            f"Invalid tag descriptor {descriptor!r}, expected 'tag[#id][.class]*'"
        )
