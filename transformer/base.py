"""Abstract base class for schedule transformers."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from scraper.models import MonthResult


class BaseTransformer(ABC):
    """Abstract base class defining the interface for schedule transformers.

    Extend this class to implement transformers for other output formats.
    """

    @abstractmethod
    def transform(self, results: list[MonthResult], generated_at: datetime) -> Any:
        """Transform parsed months into the target format.

        Args:
            results: Parsed months, in output order.
            generated_at: Generation timestamp stamped on every record.

        Returns:
            Transformed data in the target format.
        """
        pass

    @abstractmethod
    def save(self, output_path: str) -> None:
        """Save the transformed data to a file.

        Args:
            output_path: Path to the output file.
        """
        pass
