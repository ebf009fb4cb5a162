# portfolio_api/router/routers.py

from fastapi import FastAPI
from portfolio_api.modules.contact.contact_controller import router as contact_router
from portfolio_api.modules.portfolio.portfolio_controller import router as portfolio_router

def include_routers(app: FastAPI) -> None:
    app.include_router(contact_router)
    app.include_router(portfolio_router)
