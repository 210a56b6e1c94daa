from pydantic import BaseModel


class LoadError(BaseModel):
    file: str
    error: str


class SkippedFile(BaseModel):
    file: str
    reason: str


class LoadReport(BaseModel):
    loaded: int = 0
    skipped: list[SkippedFile] = []
    errors: list[LoadError] = []
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.errors
