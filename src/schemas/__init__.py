"""Schema package for external and internal contracts."""

from .requests import RerankRequest
from .responses import RerankedDocument, RerankResponse, Usage

__all__ = ["RerankRequest", "RerankResponse", "RerankedDocument", "Usage"]
