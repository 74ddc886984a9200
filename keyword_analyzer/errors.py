from __future__ import annotations

from typing import List, Optional


class AnalysisError(Exception):
    """Terminal failure for one analysis run. `message` is safe to show users."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeFailure(AnalysisError):
    def __init__(self, message: str = "Could not read file", detected: Optional[str] = None):
        super().__init__(message)
        self.detected = detected


class MissingColumn(AnalysisError):
    def __init__(self, column: str, headers: List[str]):
        super().__init__(
            f'Invalid CSV format: "{column}" column not found. '
            "Make sure this is a Google Ads Keyword Planner export."
        )
        self.column = column
        self.headers = headers


class EmptyResult(AnalysisError):
    def __init__(self, message: str = "No keywords found in the file."):
        super().__init__(message)
