"""Common perfmon compile errors."""


class PerfmonCompileError(Exception):

    def __init__(self, message: str, *, value: object = None, file: str | None = None, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.value = value
        self.file = file
        self.field = field

    def locate(self, *, file: str | None = None, field: str | None = None) -> "PerfmonCompileError":
        # keep the innermost location if one was already attached
        if self.file is None:
            self.file = file
        if self.field is None:
            self.field = field
        return self

    def __str__(self) -> str:
        location = []
        if self.file is not None:
            location.append(f"file {self.file}")
        if self.field is not None:
            location.append(f"field {self.field}")
        if self.value is not None:
            location.append(f"value {self.value!r}")
        if not location:
            return self.message
        return f"{self.message} ({', '.join(location)})"

class MalformedRow(PerfmonCompileError):
    pass

class UnknownFileSuffix(PerfmonCompileError):
    pass

class MalformedNumeral(PerfmonCompileError):
    pass

class InvalidBoolean(PerfmonCompileError):
    pass

class OversizedBitmask(PerfmonCompileError):
    pass

class InvalidPebsType(PerfmonCompileError):
    pass

class MissingFile(PerfmonCompileError):
    pass

class MalformedRecordSchema(PerfmonCompileError):
    pass
