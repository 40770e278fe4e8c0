"""Main web application entry point."""

from fastapi import FastAPI
from licitasaas.web.routers import analysis, uploads
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

app = FastAPI(title="LicitaSaaS", description="Análise de editais de licitação assistida por IA.")
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.include_router(analysis.router)
app.include_router(uploads.router)


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Status dictionary.
    """
    return {"status": "ok"}
