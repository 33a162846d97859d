from ninja_extra import ControllerBase, api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.throttling import AssistantThrottle

from . import schema, service
from .llms.llm_interfaces import Recommendations, VenueOption


@api_controller("/assistant", auth=JWTAuth(), tags=["Assistant"], throttle=AssistantThrottle())
class AssistantController(ControllerBase):
    """Drafting help. Nothing here is stored; callers copy what they like into their event."""

    @route.post("/description", url_name="assistant_description", response=schema.DescriptionResponseSchema)
    def description(self, payload: schema.DescriptionRequestSchema) -> dict[str, str]:
        """Draft an event description."""
        return {"description": service.generate_description(**payload.model_dump())}

    @route.post(
        "/review-feedback", url_name="assistant_review_feedback", response=schema.ReviewFeedbackResponseSchema
    )
    def review_feedback(self, payload: schema.ReviewFeedbackRequestSchema) -> dict[str, str]:
        """Draft the comment for a review decision."""
        return {"feedback": service.generate_review_feedback(**payload.model_dump())}

    @route.post("/recommendations", url_name="assistant_recommendations", response=schema.RecommendationsSchema)
    def recommendations(self, payload: schema.RecommendationRequestSchema) -> Recommendations:
        """Suggest a venue, attendance, risks and improvements."""
        venues = None
        if payload.venues is not None:
            venues = [VenueOption(**v.model_dump()) for v in payload.venues]
        return service.recommend(
            title=payload.title, category=payload.category, description=payload.description, venues=venues
        )
