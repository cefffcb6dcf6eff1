import structlog

from bundle_api.bundle_generator import BundleGenerator
from bundle_api.render_bundle.request import (
    RenderSearchBundleRequest,
    RenderTransactionBundleRequest,
)

logger = structlog.get_logger(__name__)


class RenderBundleHandler:
    generator: BundleGenerator = BundleGenerator()

    @classmethod
    def handle_search(cls, request: RenderSearchBundleRequest) -> None:
        try:
            bundle = cls.generator.generate_bundle(
                base_url=request.base_url,
                query_params=request.query_params,
                search_result=request.search_result,
                bundle_type=request.bundle_type,
                resource_type=request.resource_type,
                id=request.resource_id,
            )
        except Exception as e:
            logger.exception("render_search_bundle_failed")
            request.set_negative_response(f"Failed to render bundle: {e}")
            return

        request.set_response(bundle)

    @classmethod
    def handle_transaction(cls, request: RenderTransactionBundleRequest) -> None:
        try:
            bundle = cls.generator.generate_transaction_bundle(
                base_url=request.base_url,
                bundle_entry_responses=request.responses,
            )
        except Exception as e:
            logger.exception("render_transaction_bundle_failed")
            request.set_negative_response(f"Failed to render bundle: {e}")
            return

        request.set_response(bundle)
