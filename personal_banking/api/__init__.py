"""
Personal Banking API Application Factory
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .accounts import router as accounts_router
from .owners import router as owners_router
from .transactions import router as transactions_router
from .. import __version__
from ..errors import BankingError


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Personal Banking Core API",
        description="Accounts, balances and an append-only ledger of money movements",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    @app.exception_handler(BankingError)
    async def banking_error_handler(request: Request, exc: BankingError):
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    app.include_router(owners_router, tags=["Owners"])
    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(transactions_router, prefix="/transactions", tags=["Transactions"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "personal_banking_api",
            "version": __version__
        }

    return app


app = create_app()
