# portfolio_api/modules/portfolio/portfolio_service.py

import json
import os
from functools import lru_cache

from portfolio_api.modules.portfolio.schemas import PortfolioResponse

DATA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "portfolio.json")


@lru_cache(maxsize=1)
def get_portfolio(path: str = DATA_FILE) -> PortfolioResponse:
    """Load the profile document shipped with the package."""
    with open(path, encoding="utf-8") as fh:
        return PortfolioResponse.model_validate(json.load(fh))
