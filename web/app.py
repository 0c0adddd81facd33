"""
FastAPI application for the market study valuation engine.

Stateless JSON endpoints around ValuationService. Production deployment
configuration via environment variables.
"""

import logging
import os
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from core.market_study import (
    ValuationInputError,
    ValuationService,
    build_market_study,
    __version__,
)
from utils.config import Config


logger = logging.getLogger(__name__)


# =============================================================================
# Environment Configuration
# =============================================================================

# Production mode detection
IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

# CORS configuration - locked down for production
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]


# =============================================================================
# Request Models
# =============================================================================

class CharacteristicsInput(BaseModel):
    """Subject property characteristics."""
    bedrooms: int = Field(0, ge=0, le=50)
    bathrooms: int = Field(0, ge=0, le=50)
    parking_spots: int = Field(0, ge=0, le=50)
    additional_features: List[str] = []


class SampleInput(BaseModel):
    """A comparable market sample."""
    id: Optional[str] = None
    location: str = Field(..., min_length=1)
    area: float = Field(..., gt=0)
    price: float = Field(..., gt=0)
    status: str = "for_sale"
    characteristics: Dict[str, float] = {}
    listing_date: Optional[str] = None
    sale_date: Optional[str] = None


class MarketStudyRequest(BaseModel):
    """Request body for valuation and report generation."""
    address: str = Field(..., min_length=1)
    property_area: float = Field(..., gt=0)
    property_characteristics: CharacteristicsInput = CharacteristicsInput()
    evaluation_type: str = "sale"
    factor_names: List[str] = ["bedrooms", "bathrooms", "parking_spots"]
    samples: List[SampleInput] = Field(..., min_length=3, max_length=50)
    perception_factor: float = Field(0, ge=-50, le=50)
    selected_standard: Optional[str] = None


def get_service(request: Request) -> ValuationService:
    """Valuation service built at startup."""
    return request.app.state.service


def get_currency(request: Request) -> str:
    """Currency code of sample prices, from the app config."""
    return request.app.state.config.currency


def create_app(
    service: Optional[ValuationService] = None,
    config: Optional[Config] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        service: Valuation service to use (default: built from config)
        config: Application config (default: loaded from environment)
    """
    config = config or Config.load()

    app = FastAPI(
        title="Market Study Valuation Engine",
        description="Comparative method property valuation",
        version=__version__,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=config.debug and not IS_PRODUCTION,
    )
    app.state.service = service or ValuationService.from_config(config)
    app.state.config = config

    # ==========================================================================
    # Healthcheck endpoints: no dependencies, no IO.
    # ==========================================================================
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.exception_handler(ValuationInputError)
    async def valuation_input_error_handler(request: Request, exc: ValuationInputError):
        logger.warning("Rejected %s: %s", request.url.path, exc)
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.post("/api/market-study/valuate")
    def valuate_endpoint(
        request_data: MarketStudyRequest,
        service: ValuationService = Depends(get_service),
        currency: str = Depends(get_currency),
    ):
        """
        Valuate a market study.

        Returns the serialized study: homogenized samples, statistical
        analysis, one valuation per standard and the recommended value.
        """
        study = build_market_study(request_data.model_dump(), service, currency)
        return study.to_dict()

    @app.post("/api/market-study/report")
    def report_endpoint(
        request_data: MarketStudyRequest,
        service: ValuationService = Depends(get_service),
        currency: str = Depends(get_currency),
    ):
        """Valuate a market study and return it as a PDF report."""
        from reporting.pdf_generator import MarketStudyReportGenerator

        study = build_market_study(request_data.model_dump(), service, currency)
        pdf_bytes = MarketStudyReportGenerator(study).generate_to_buffer()
        filename = f"estudo-de-mercado-{study.id[:8]}.pdf"
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/api/health")
    def api_health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "environment": "production" if IS_PRODUCTION else "development",
        }

    return app


# Create app instance for uvicorn
app = create_app()
