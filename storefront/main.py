# storefront/main.py
from typing import Optional

import uvicorn
from fastapi import FastAPI
from sqlalchemy.engine import Engine

from storefront.api import include_routers
from storefront.data.database import Base, make_engine, make_session_factory
from storefront.domain.pricing import PricingPolicy
from storefront.utils.logging import get_logger
from storefront.utils.settings import DATABASE_URL

# register all models on Base.metadata before create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


def create_app(
    database_url: Optional[str] = None,
    engine: Optional[Engine] = None,
    pricing_policy: Optional[PricingPolicy] = None,
    create_tables: bool = True,
) -> FastAPI:
    """
    Builds the app around its own engine/session factory.
    Pass `engine` to share one with the caller (tests), otherwise one is
    created from `database_url` or DATABASE_URL.
    """
    engine = engine or make_engine(database_url or DATABASE_URL)

    if create_tables:
        logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
        Base.metadata.create_all(bind=engine)

    app = FastAPI(
        title="Storefront Cart & Orders",
        version="1.0.0",
    )
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.pricing_policy = pricing_policy or PricingPolicy.from_settings()

    include_routers(app)
    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
