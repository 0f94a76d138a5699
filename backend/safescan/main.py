"""
FastAPI application entry point and endpoint definitions.

This module initializes the FastAPI application and defines all API routes
for the product safety scoring service.

Responsibilities:
- Initialize FastAPI application with CORS and error handling
- Validate request payloads at the boundary
- Coordinate service layer calls
- Map validation failures to 400 and unexpected failures to 500
"""

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from typing import List, Optional
import logging

from safescan.config import settings
from safescan.models.api import (
    AnalyzeRequest,
    AnalyzeResponse,
    AssessRequest,
    ClassifyRequest,
    ClassifyResponse,
    CompareRequest,
    CompareResponse,
    InsightsRequest,
    RecommendRequest,
    RecommendResponse,
    ScoreRequest,
)
from safescan.models.classification import IngredientTag
from safescan.models.health_score import HealthScore
from safescan.models.product import Product, UserProfile
from safescan.models.recommendation import PersonalizedInsights
from safescan.models.risk import RiskVerdict
from safescan.services.health_scorer import HealthScorer
from safescan.services.ingredient_classifier import IngredientClassifier
from safescan.services.recommendation_engine import RecommendationEngine
from safescan.services.risk_assessor import ContaminantRiskAssessor
from safescan.utils.validators import (
    validate_catalog,
    validate_ingredient_list,
    validate_product_id,
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_app() -> FastAPI:
    """
    Initialize and configure the FastAPI application.

    Sets up:
    - CORS middleware for frontend communication
    - Exception handlers for consistent error responses
    - Application metadata

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="SafeScan Product Safety API",
        description="Health scoring, ingredient classification, contaminant risk and safer alternatives for consumer products",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handler for consistent error responses
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Handle all uncaught exceptions with consistent error format.

        Args:
            request: The incoming request object
            exc: The exception that was raised

        Returns:
            JSONResponse: Formatted error response
        """
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error occurred",
                "error": str(exc)
            }
        )

    return app


# Initialize FastAPI application
app = create_app()

# Initialize service layer instances
health_scorer = HealthScorer()
ingredient_classifier = IngredientClassifier()
risk_assessor = ContaminantRiskAssessor()
recommendation_engine = RecommendationEngine(
    health_scorer,
    max_results=settings.MAX_RECOMMENDATIONS,
    min_confidence=settings.MIN_RECOMMENDATION_CONFIDENCE,
)


def resolve_profile(user_profile: Optional[UserProfile]) -> UserProfile:
    """Fall back to a neutral profile at the configured risk sensitivity."""
    if user_profile is not None:
        return user_profile
    return UserProfile(risk_sensitivity=settings.DEFAULT_RISK_SENSITIVITY)


def validate_product(product: Product) -> None:
    validate_product_id(product.id)
    validate_ingredient_list(product.ingredients, max_items=settings.MAX_INGREDIENTS)


def validate_products(products: List[Product]) -> None:
    validate_catalog([p.id for p in products], max_size=settings.MAX_CATALOG_SIZE)
    for product in products:
        validate_ingredient_list(product.ingredients, max_items=settings.MAX_INGREDIENTS)


def bad_request(error: ValueError) -> HTTPException:
    logger.warning(f"Rejected request: {str(error)}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(error)
    )


def server_error(action: str, error: Exception) -> HTTPException:
    """
    Log an internal failure and wrap it as a 500.

    Model validation errors raised while building results are reported
    here, not as 400s.
    """
    logger.error(f"Failed to {action}: {str(error)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(error)}"
    )


@app.get("/")
async def root():
    """
    Root endpoint.

    Returns:
        dict: API status and version information
    """
    return {
        "message": "SafeScan Product Safety API",
        "version": API_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """
    Readiness check.

    Returns:
        dict: Status of each service and the active tuning values
    """
    return {
        "status": "healthy",
        "services": {
            "health_scorer": "ok",
            "ingredient_classifier": "ok",
            "risk_assessor": "ok",
            "recommendation_engine": "ok",
        },
        "config": {
            "max_recommendations": settings.MAX_RECOMMENDATIONS,
            "min_recommendation_confidence": settings.MIN_RECOMMENDATION_CONFIDENCE,
            "default_risk_sensitivity": settings.DEFAULT_RISK_SENSITIVITY,
        }
    }


@app.post("/score", response_model=HealthScore)
async def score_product(request: ScoreRequest) -> HealthScore:
    """
    Compute the health score of one product for a user.

    Args:
        request: ScoreRequest with product and optional user profile

    Returns:
        HealthScore: Score, rating, grade and breakdown

    Raises:
        HTTPException: 400 on invalid product, 500 if scoring fails
    """
    try:
        validate_product(request.product)
        logger.info(f"Scoring product: {request.product.id}")
        return health_scorer.calculate_health_score(
            request.product,
            resolve_profile(request.user_profile)
        )

    except ValidationError as e:
        raise server_error("score product", e)
    except ValueError as e:
        raise bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("score product", e)


@app.post("/classify", response_model=ClassifyResponse)
async def classify_ingredients(request: ClassifyRequest) -> ClassifyResponse:
    """
    Tag each ingredient with a single risk category.

    Args:
        request: ClassifyRequest with ingredients, contaminants and allergens

    Returns:
        ClassifyResponse: One classified entry per ingredient plus counts

    Raises:
        HTTPException: 400 on invalid ingredients, 500 if classification fails
    """
    try:
        validate_ingredient_list(request.ingredients, max_items=settings.MAX_INGREDIENTS)

        classified = ingredient_classifier.classify_ingredients(
            request.ingredients,
            request.contaminants,
            request.selected_allergens
        )
        return ClassifyResponse(
            ingredients=classified,
            summary=ingredient_classifier.summarize(classified)
        )

    except ValidationError as e:
        raise server_error("classify ingredients", e)
    except ValueError as e:
        raise bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("classify ingredients", e)


@app.post("/assess", response_model=RiskVerdict)
async def assess_risk(request: AssessRequest) -> RiskVerdict:
    """
    Rate the overall contaminant risk of a product.

    Args:
        request: AssessRequest with the contaminant list

    Returns:
        RiskVerdict: Risk tier, factors and recommendations
    """
    try:
        return risk_assessor.assess_contaminant_risk(request.contaminants)

    except Exception as e:
        raise server_error("assess contaminant risk", e)


@app.post("/recommend", response_model=RecommendResponse)
async def recommend_alternatives(request: RecommendRequest) -> RecommendResponse:
    """
    Find strictly better alternatives within a catalog.

    When current_score is omitted it is computed with the same profile
    used to rescore the catalog.

    Args:
        request: RecommendRequest with product, catalog and optional score/profile

    Returns:
        RecommendResponse: Ranked alternatives

    Raises:
        HTTPException: 400 on invalid product or catalog, 500 if ranking fails
    """
    try:
        validate_product(request.product)
        validate_products(request.catalog)

        profile = resolve_profile(request.user_profile)
        current_score = request.current_score
        if current_score is None:
            current_score = health_scorer.calculate_health_score(request.product, profile).score

        recommendations = recommendation_engine.recommend_alternatives(
            request.product,
            current_score,
            request.catalog,
            profile
        )

        return RecommendResponse(
            product_id=request.product.id,
            current_score=current_score,
            recommendations=recommendations
        )

    except ValidationError as e:
        raise server_error("recommend alternatives", e)
    except ValueError as e:
        raise bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("recommend alternatives", e)


@app.post("/compare", response_model=CompareResponse)
async def compare_products(request: CompareRequest) -> CompareResponse:
    """
    Score several products and rank them best first.

    Raises:
        HTTPException: 400 on invalid or duplicate products
    """
    try:
        validate_products(request.products)
        ranked = health_scorer.score_products(
            request.products,
            resolve_profile(request.user_profile)
        )
        return CompareResponse(ranked=ranked)

    except ValidationError as e:
        raise server_error("compare products", e)
    except ValueError as e:
        raise bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("compare products", e)


@app.post("/insights", response_model=PersonalizedInsights)
async def personalized_insights(request: InsightsRequest) -> PersonalizedInsights:
    """
    Summarize a scan history into habits worth changing.

    Raises:
        HTTPException: 400 on invalid history, 500 if summarizing fails
    """
    try:
        # Repeat scans of the same product are expected, so no duplicate check
        if len(request.scan_history) > settings.MAX_CATALOG_SIZE:
            raise ValueError(
                f"Scan history cannot exceed {settings.MAX_CATALOG_SIZE} products "
                f"(got {len(request.scan_history)})"
            )
        for product in request.scan_history:
            validate_product(product)

        return recommendation_engine.get_personalized_insights(
            request.scan_history,
            resolve_profile(request.user_profile)
        )

    except ValidationError as e:
        raise server_error("build insights", e)
    except ValueError as e:
        raise bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("build insights", e)


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze_product(request: AnalyzeRequest) -> AnalyzeResponse:
    """
    Run the full analysis on one product.

    This endpoint:
    1. Scores the product for the user
    2. Classifies its ingredients
    3. Assesses its contaminant risk
    4. Recommends alternatives from the catalog (when one is supplied)
    5. Builds a one-line advice banner

    Args:
        request: AnalyzeRequest with product, optional profile and catalog

    Returns:
        AnalyzeResponse: Complete analysis

    Raises:
        HTTPException: 400 on invalid input, 500 if processing fails
    """
    try:
        product = request.product
        validate_product(product)
        validate_products(request.catalog)

        logger.info(f"Analyzing product: {product.id}")
        profile = resolve_profile(request.user_profile)

        # Step 1: Score
        health_score = health_scorer.calculate_health_score(product, profile)

        # Step 2: Classify ingredients
        classified = ingredient_classifier.classify_ingredients(
            product.ingredients,
            product.contaminants,
            profile.selected_allergens
        )
        summary = ingredient_classifier.summarize(classified)

        # Step 3: Contaminant risk
        risk = risk_assessor.assess_contaminant_risk(product.contaminants)

        # Step 4: Alternatives
        recommendations = []
        if request.catalog:
            recommendations = recommendation_engine.recommend_alternatives(
                product,
                health_score.score,
                request.catalog,
                profile
            )

        # Step 5: Advice
        advice = health_scorer.get_risk_advice(
            health_score.score,
            allergens_detected=summary.counts[IngredientTag.ALLERGEN.value],
            toxins_detected=(
                summary.counts[IngredientTag.TOXIN.value]
                + summary.counts[IngredientTag.PFAS.value]
            )
        )

        logger.info(
            f"Analysis complete. Score: {health_score.score}, "
            f"Rating: {health_score.rating}, Risk: {risk.overall_risk}"
        )

        return AnalyzeResponse(
            product=product,
            health_score=health_score,
            ingredients=classified,
            summary=summary,
            risk=risk,
            recommendations=recommendations,
            advice=advice
        )

    except ValidationError as e:
        raise server_error("analyze product", e)
    except ValueError as e:
        raise bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("analyze product", e)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
