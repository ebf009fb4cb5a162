# portfolio_api/modules/portfolio/portfolio_controller.py

from fastapi import APIRouter

from portfolio_api.modules.portfolio import portfolio_service, schemas

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


@router.get("", response_model=schemas.PortfolioResponse)
async def get_portfolio():
    return portfolio_service.get_portfolio()
