"""Base classes for detector plugins."""

from abc import ABC, abstractmethod
from typing import Iterable

from bs4 import BeautifulSoup


class Detector(ABC):
    """Contract for detectors that infer required components from a parsed document."""

    name: str = "detector"

    @abstractmethod
    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        """Yield the component names this detector finds evidence for."""
